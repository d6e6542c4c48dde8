from __future__ import annotations

from typing import List, Optional

from ..db import get_conn
from ..domain.entities import Tag
from ..repository import preset_repo, tag_repo
from .utils import audited, new_id

DEFAULT_COLOR = "#6366f1"


def list_tags() -> List[Tag]:
    """
    All tags ordered by name, each with ``count`` = number of presets whose
    tag list contains the name as an element. A preset tagged "start" does
    not count toward "art"; a preset listing a tag twice counts once.
    """
    with get_conn() as conn:
        rows = tag_repo.list_all(conn)
        tag_lists = preset_repo.list_tag_lists(conn)
    preset_tag_sets = [set(tl) for tl in tag_lists]
    out: List[Tag] = []
    for r in rows:
        count = sum(1 for s in preset_tag_sets if r["name"] in s)
        out.append(Tag(id=r["id"], name=r["name"], color=r["color"], count=count))
    return out


def get_tag(tag_id: str) -> Optional[Tag]:
    with get_conn() as conn:
        row = tag_repo.get_one(conn, tag_id)
        if not row:
            return None
        count = sum(1 for tl in preset_repo.list_tag_lists(conn) if row["name"] in tl)
    return Tag(id=row["id"], name=row["name"], color=row["color"], count=count)


def create_tag(name: str, color: str = DEFAULT_COLOR) -> Tag:
    """Duplicate names are rejected by the table's UNIQUE constraint (StoreError)."""
    tag = Tag(id=new_id(), name=name, color=color, count=0)
    with audited("CREATE_TAG", "TAG", tag.id) as (conn, log):
        tag_repo.insert(conn, tag.id, name, color)
        log.set_payload({"name": name, "color": color})
    return tag


def delete_tag(tag_id: str) -> None:
    """Presets keep the name in their own tag lists."""
    with audited("DELETE_TAG", "TAG", tag_id) as (conn, log):
        log.set_payload({"affected": tag_repo.delete(conn, tag_id)})
