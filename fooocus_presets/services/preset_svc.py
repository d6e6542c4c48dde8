"""
Preset CRUD.

Reads return decoded Preset entities (undecodable embedded columns already
replaced by defaults); a missing id reads as None. Mutations on an unknown
id touch zero rows and are not errors.
"""
from __future__ import annotations

from typing import List, Optional

from ..db import get_conn
from ..domain.entities import Preset
from ..repository import preset_repo
from .utils import audited, new_id, now_iso


def list_presets() -> List[Preset]:
    with get_conn() as conn:
        return preset_repo.list_all(conn)


def get_preset(preset_id: str) -> Optional[Preset]:
    with get_conn() as conn:
        return preset_repo.get_one(conn, preset_id)


def search_presets(query: str) -> List[Preset]:
    """Case-sensitive substring match on name, description and the stored tag list."""
    with get_conn() as conn:
        return preset_repo.search(conn, query)


def create_preset(data: Preset) -> Preset:
    now = now_iso()
    preset = data.model_copy(update={
        "id": new_id(),
        "use_count": 0,
        "created_at": now,
        "updated_at": now,
    }, deep=True)
    with audited("CREATE_PRESET", "PRESET", preset.id) as (conn, log):
        preset_repo.insert(conn, preset)
        log.set_payload({"name": data.name})
        log.set_after(preset.to_json_dict())
    return preset


def update_preset(data: Preset) -> Preset:
    """
    Overwrite the stored preset with ``data``. ``created_at`` is kept from the
    stored row and ``updated_at`` is refreshed; ``use_count`` is written as given.
    """
    preset = data.model_copy(update={"updated_at": now_iso()}, deep=True)
    with audited("UPDATE_PRESET", "PRESET", data.id) as (conn, log):
        created_at = preset_repo.get_created_at(conn, data.id)
        affected = preset_repo.update(conn, preset)
        if created_at is not None:
            preset = preset.model_copy(update={"created_at": created_at})
        log.set_payload({"affected": affected})
        log.set_after(preset.to_json_dict())
    return preset


def delete_preset(preset_id: str) -> None:
    with audited("DELETE_PRESET", "PRESET", preset_id) as (conn, log):
        log.set_payload({"affected": preset_repo.delete(conn, preset_id)})


def toggle_favorite(preset_id: str) -> None:
    with audited("TOGGLE_FAVORITE", "PRESET", preset_id) as (conn, _):
        preset_repo.toggle_favorite(conn, preset_id, now_iso())


def increment_use_count(preset_id: str) -> None:
    with audited("INCREMENT_USE_COUNT", "PRESET", preset_id) as (conn, _):
        preset_repo.increment_use_count(conn, preset_id, now_iso())
