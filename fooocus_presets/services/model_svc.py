from __future__ import annotations

from typing import List, Optional

from ..db import get_conn
from ..domain.entities import ModelInfo
from ..repository import model_repo
from .utils import audited, new_id, now_iso


def list_models() -> List[ModelInfo]:
    with get_conn() as conn:
        return model_repo.list_all(conn)


def get_models_by_type(model_type: str) -> List[ModelInfo]:
    with get_conn() as conn:
        return model_repo.list_by_type(conn, model_type)


def get_model(model_id: str) -> Optional[ModelInfo]:
    with get_conn() as conn:
        return model_repo.get_one(conn, model_id)


def search_models(query: str) -> List[ModelInfo]:
    """Case-sensitive substring match on name, description, scope and tags."""
    with get_conn() as conn:
        return model_repo.search(conn, query)


def create_model(data: ModelInfo) -> ModelInfo:
    now = now_iso()
    model = data.model_copy(update={"id": new_id(), "created_at": now, "updated_at": now}, deep=True)
    with audited("CREATE_MODEL", "MODEL", model.id) as (conn, log):
        model_repo.insert(conn, model)
        log.set_after(model.to_json_dict())
    return model


def update_model(data: ModelInfo) -> ModelInfo:
    model = data.model_copy(update={"updated_at": now_iso()}, deep=True)
    with audited("UPDATE_MODEL", "MODEL", data.id) as (conn, log):
        created_at = model_repo.get_created_at(conn, data.id)
        affected = model_repo.update(conn, model)
        if created_at is not None:
            model = model.model_copy(update={"created_at": created_at})
        log.set_payload({"affected": affected})
        log.set_after(model.to_json_dict())
    return model


def delete_model(model_id: str) -> None:
    """Always allowed, even while presets still reference the model (see usage_svc)."""
    with audited("DELETE_MODEL", "MODEL", model_id) as (conn, log):
        log.set_payload({"affected": model_repo.delete(conn, model_id)})
