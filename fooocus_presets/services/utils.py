from __future__ import annotations

# fooocus_presets/services/utils.py
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Tuple

from ..db import get_conn
from ..errors import DatabaseNotInitializedError, PresetStoreError
from ..logs import LogContext


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def new_id() -> str:
    return str(uuid.uuid4())


@contextmanager
def audited(action: str, entity_type: str, entity_id: str | None = None) -> Iterator[Tuple[sqlite3.Connection, LogContext]]:
    """
    Hold the store lock for one mutating operation and yield ``(conn, log)``.
    On success the operation_log row is written on the same connection before
    the lock is released; a failure leaves no row behind and is only logged.
    """
    log = LogContext(action, entity_type, entity_id)
    try:
        with get_conn() as conn:
            yield conn, log
            log.write(conn)
    except DatabaseNotInitializedError:
        raise
    except PresetStoreError as e:
        log.fail(str(e))
        raise
