from __future__ import annotations

# fooocus_presets/db.py
import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator

import yaml

from .errors import DatabaseNotInitializedError, StorageInitError, StoreError

logger = logging.getLogger(__name__)

# Data directory resolution order:
# 1) explicit argument to init_db()
# 2) env FOOOCUS_PRESETS_DATA_DIR
# 3) config.yaml test_data_dir (under pytest / APP_ENV=test), then data_dir
# 4) ~/.fooocus-config-manager
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_DEFAULT_DATA_DIR = os.path.join(os.path.expanduser("~"), ".fooocus-config-manager")

DB_FILE_NAME = "fooocus_config.db"

DDL = """
CREATE TABLE IF NOT EXISTS presets (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT,
    tags TEXT,
    is_favorite INTEGER DEFAULT 0,
    use_count INTEGER DEFAULT 0,
    created_at TEXT,
    updated_at TEXT,
    model_config TEXT,
    sampling_config TEXT,
    prompt_config TEXT,
    image_config TEXT,
    resources TEXT
);

CREATE TABLE IF NOT EXISTS tags (
    id TEXT PRIMARY KEY,
    name TEXT UNIQUE NOT NULL,
    color TEXT DEFAULT '#6366f1'
);

CREATE TABLE IF NOT EXISTS models (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    file_name TEXT,
    model_type TEXT NOT NULL,
    description TEXT,
    scope TEXT,
    path TEXT,
    tags TEXT,
    created_at TEXT,
    updated_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_presets_name ON presets(name);
CREATE INDEX IF NOT EXISTS idx_presets_created_at ON presets(created_at);
CREATE INDEX IF NOT EXISTS idx_presets_is_favorite ON presets(is_favorite);
CREATE INDEX IF NOT EXISTS idx_models_name ON models(name);
CREATE INDEX IF NOT EXISTS idx_models_type ON models(model_type);
"""


def _config_path() -> str:
    return os.environ.get("FOOOCUS_PRESETS_CONFIG") or os.path.join(_PROJECT_ROOT, "config.yaml")


def read_config_yaml() -> dict:
    cfg_path = _config_path()
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("ignoring unreadable config %s: %s", cfg_path, e)
        return {}
    if not isinstance(cfg, dict):
        return {}
    out = {}
    for k in ("data_dir", "test_data_dir", "log_level"):
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = v.strip()
    return out


def get_data_dir(explicit: str | os.PathLike | None = None) -> str:
    if explicit:
        return os.path.expanduser(os.fspath(explicit))
    env_dir = os.environ.get("FOOOCUS_PRESETS_DATA_DIR")
    if env_dir:
        return os.path.expanduser(env_dir)
    cfg = read_config_yaml()
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)
    if is_test and cfg.get("test_data_dir"):
        return os.path.expanduser(cfg["test_data_dir"])
    if cfg.get("data_dir"):
        return os.path.expanduser(cfg["data_dir"])
    return _DEFAULT_DATA_DIR


class Database:
    """The one shared connection plus the lock that serializes access to it."""

    def __init__(self, path: str):
        self.path = path
        self.conn = sqlite3.connect(
            path,
            check_same_thread=False,
            isolation_level=None,
        )
        self.conn.row_factory = sqlite3.Row
        self.lock = threading.Lock()

    def ensure_schema(self):
        from .logs import LOG_DDL, prune_logs

        with self.lock:
            self.conn.executescript(DDL)
            self.conn.executescript(LOG_DDL)
            prune_logs(self.conn)

    def close(self):
        with self.lock:
            self.conn.close()


_db: Database | None = None


def init_db(storage_dir: str | os.PathLike | None = None) -> Database:
    """
    Open (creating if needed) the database inside the data directory and make
    sure every table and index exists. Safe to call again; the previous
    connection is closed first.
    """
    global _db
    data_dir = get_data_dir(storage_dir)
    try:
        os.makedirs(data_dir, exist_ok=True)
    except OSError as e:
        raise StorageInitError(f"cannot create data directory {data_dir}: {e}") from e
    path = os.path.join(data_dir, DB_FILE_NAME)
    try:
        db = Database(path)
    except sqlite3.Error as e:
        raise StorageInitError(f"cannot open database {path}: {e}") from e
    try:
        db.ensure_schema()
    except sqlite3.Error as e:
        db.close()
        raise StorageInitError(f"cannot create schema in {path}: {e}") from e
    if _db is not None:
        _db.close()
    _db = db
    logger.info("preset database ready at %s", path)
    return db


def close_db():
    global _db
    if _db is not None:
        _db.close()
        _db = None


def get_db() -> Database:
    if _db is None:
        raise DatabaseNotInitializedError("database is not initialized; call init_db() first")
    return _db


@contextmanager
def get_conn() -> Iterator[sqlite3.Connection]:
    """
    Hold the store lock for one operation and hand out the shared connection.
    sqlite3 errors raised inside the block surface as StoreError.
    """
    db = get_db()
    with db.lock:
        try:
            yield db.conn
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
