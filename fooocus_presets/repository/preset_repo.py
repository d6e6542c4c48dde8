from __future__ import annotations

from sqlite3 import Connection, Row
from typing import List, Optional

from ..domain import codec
from ..domain.entities import (
    ImageConfig,
    ModelConfig,
    Preset,
    PromptConfig,
    SamplingConfig,
    default_image_config,
    default_model_config,
    default_prompt_config,
    default_sampling_config,
)

_COLS = (
    "id, name, description, tags, is_favorite, use_count, created_at, updated_at, "
    "model_config, sampling_config, prompt_config, image_config, resources"
)


def row_to_preset(r: Row) -> Preset:
    return Preset(
        id=r["id"],
        name=r["name"],
        description=r["description"] or "",
        tags=codec.decode_list(r["tags"], "presets.tags"),
        is_favorite=bool(r["is_favorite"]),
        use_count=r["use_count"] or 0,
        created_at=r["created_at"] or "",
        updated_at=r["updated_at"] or "",
        model=codec.decode(r["model_config"], ModelConfig, default_model_config, "model_config"),
        sampling=codec.decode(r["sampling_config"], SamplingConfig, default_sampling_config, "sampling_config"),
        prompt=codec.decode(r["prompt_config"], PromptConfig, default_prompt_config, "prompt_config"),
        image=codec.decode(r["image_config"], ImageConfig, default_image_config, "image_config"),
        resources=codec.decode_resources(r["resources"]),
    )


def list_all(conn: Connection) -> List[Preset]:
    rows = conn.execute(f"SELECT {_COLS} FROM presets ORDER BY updated_at DESC").fetchall()
    return [row_to_preset(r) for r in rows]


def get_one(conn: Connection, preset_id: str) -> Optional[Preset]:
    row = conn.execute(f"SELECT {_COLS} FROM presets WHERE id=?", (preset_id,)).fetchone()
    return row_to_preset(row) if row else None


def search(conn: Connection, q: str) -> List[Preset]:
    # instr() is case-sensitive and treats % and _ literally, unlike LIKE
    sql = (
        f"SELECT {_COLS} FROM presets "
        "WHERE instr(name, :q) > 0 OR instr(COALESCE(description,''), :q) > 0 "
        "OR instr(COALESCE(tags,''), :q) > 0 "
        "ORDER BY updated_at DESC"
    )
    return [row_to_preset(r) for r in conn.execute(sql, {"q": q}).fetchall()]


def list_tag_lists(conn: Connection) -> List[List[str]]:
    rows = conn.execute("SELECT tags FROM presets").fetchall()
    return [codec.decode_list(r["tags"], "presets.tags") for r in rows]


def insert(conn: Connection, p: Preset):
    conn.execute(
        f"INSERT INTO presets ({_COLS}) VALUES (?,?,?,?,?,?,?,?,?,?,?,?,?)",
        (
            p.id,
            p.name,
            p.description,
            codec.encode_list(p.tags),
            1 if p.is_favorite else 0,
            p.use_count,
            p.created_at,
            p.updated_at,
            codec.encode(p.model),
            codec.encode(p.sampling),
            codec.encode(p.prompt),
            codec.encode(p.image),
            codec.encode_resources(p.resources),
        ),
    )


def update(conn: Connection, p: Preset) -> int:
    """Overwrite every column except id and created_at. Returns affected rows."""
    cur = conn.execute(
        "UPDATE presets SET name=?, description=?, tags=?, is_favorite=?, use_count=?, updated_at=?, "
        "model_config=?, sampling_config=?, prompt_config=?, image_config=?, resources=? "
        "WHERE id=?",
        (
            p.name,
            p.description,
            codec.encode_list(p.tags),
            1 if p.is_favorite else 0,
            p.use_count,
            p.updated_at,
            codec.encode(p.model),
            codec.encode(p.sampling),
            codec.encode(p.prompt),
            codec.encode(p.image),
            codec.encode_resources(p.resources),
            p.id,
        ),
    )
    return cur.rowcount


def get_created_at(conn: Connection, preset_id: str) -> Optional[str]:
    row = conn.execute("SELECT created_at FROM presets WHERE id=?", (preset_id,)).fetchone()
    return row["created_at"] if row else None


def delete(conn: Connection, preset_id: str) -> int:
    return conn.execute("DELETE FROM presets WHERE id=?", (preset_id,)).rowcount


def toggle_favorite(conn: Connection, preset_id: str, now: str) -> int:
    cur = conn.execute(
        "UPDATE presets SET is_favorite = NOT is_favorite, updated_at=? WHERE id=?",
        (now, preset_id),
    )
    return cur.rowcount


def increment_use_count(conn: Connection, preset_id: str, now: str) -> int:
    cur = conn.execute(
        "UPDATE presets SET use_count = use_count + 1, updated_at=? WHERE id=?",
        (now, preset_id),
    )
    return cur.rowcount
