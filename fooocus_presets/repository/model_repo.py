from __future__ import annotations

from sqlite3 import Connection, Row
from typing import List, Optional

from ..domain import codec
from ..domain.entities import ModelInfo

_COLS = "id, name, file_name, model_type, description, scope, path, tags, created_at, updated_at"


def row_to_model(r: Row) -> ModelInfo:
    return ModelInfo(
        id=r["id"],
        name=r["name"],
        file_name=r["file_name"] or "",
        model_type=r["model_type"],
        description=r["description"] or "",
        scope=codec.decode_list(r["scope"], "models.scope"),
        path=r["path"] or "",
        tags=codec.decode_list(r["tags"], "models.tags"),
        created_at=r["created_at"] or "",
        updated_at=r["updated_at"] or "",
    )


def list_all(conn: Connection) -> List[ModelInfo]:
    rows = conn.execute(f"SELECT {_COLS} FROM models ORDER BY updated_at DESC").fetchall()
    return [row_to_model(r) for r in rows]


def list_by_type(conn: Connection, model_type: str) -> List[ModelInfo]:
    rows = conn.execute(
        f"SELECT {_COLS} FROM models WHERE model_type=? ORDER BY updated_at DESC",
        (model_type,),
    ).fetchall()
    return [row_to_model(r) for r in rows]


def get_one(conn: Connection, model_id: str) -> Optional[ModelInfo]:
    row = conn.execute(f"SELECT {_COLS} FROM models WHERE id=?", (model_id,)).fetchone()
    return row_to_model(row) if row else None


def search(conn: Connection, q: str) -> List[ModelInfo]:
    sql = (
        f"SELECT {_COLS} FROM models "
        "WHERE instr(name, :q) > 0 OR instr(COALESCE(description,''), :q) > 0 "
        "OR instr(COALESCE(scope,''), :q) > 0 OR instr(COALESCE(tags,''), :q) > 0 "
        "ORDER BY updated_at DESC"
    )
    return [row_to_model(r) for r in conn.execute(sql, {"q": q}).fetchall()]


def insert(conn: Connection, m: ModelInfo):
    conn.execute(
        f"INSERT INTO models ({_COLS}) VALUES (?,?,?,?,?,?,?,?,?,?)",
        (
            m.id,
            m.name,
            m.file_name,
            m.model_type,
            m.description,
            codec.encode_list(m.scope),
            m.path,
            codec.encode_list(m.tags),
            m.created_at,
            m.updated_at,
        ),
    )


def update(conn: Connection, m: ModelInfo) -> int:
    cur = conn.execute(
        "UPDATE models SET name=?, file_name=?, model_type=?, description=?, "
        "scope=?, path=?, tags=?, updated_at=? WHERE id=?",
        (
            m.name,
            m.file_name,
            m.model_type,
            m.description,
            codec.encode_list(m.scope),
            m.path,
            codec.encode_list(m.tags),
            m.updated_at,
            m.id,
        ),
    )
    return cur.rowcount


def get_created_at(conn: Connection, model_id: str) -> Optional[str]:
    row = conn.execute("SELECT created_at FROM models WHERE id=?", (model_id,)).fetchone()
    return row["created_at"] if row else None


def delete(conn: Connection, model_id: str) -> int:
    return conn.execute("DELETE FROM models WHERE id=?", (model_id,)).rowcount
