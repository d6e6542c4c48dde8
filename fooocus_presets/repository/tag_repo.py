from __future__ import annotations

from sqlite3 import Connection


def list_all(conn: Connection):
    return conn.execute("SELECT id, name, COALESCE(color,'#6366f1') AS color FROM tags ORDER BY name").fetchall()


def get_one(conn: Connection, tag_id: str):
    return conn.execute(
        "SELECT id, name, COALESCE(color,'#6366f1') AS color FROM tags WHERE id=?", (tag_id,)
    ).fetchone()


def insert(conn: Connection, tag_id: str, name: str, color: str):
    # UNIQUE(name) rejects duplicates with sqlite3.IntegrityError
    conn.execute("INSERT INTO tags(id, name, color) VALUES(?, ?, ?)", (tag_id, name, color))


def delete(conn: Connection, tag_id: str) -> int:
    return conn.execute("DELETE FROM tags WHERE id=?", (tag_id,)).rowcount
