import json, logging, sqlite3, time, datetime as dt
from sqlite3 import Connection
from typing import Optional
from .db import get_conn, read_config_yaml

logger = logging.getLogger(__name__)

# Oldest rows beyond this are dropped each time the schema is ensured.
LOG_KEEP_ROWS = 10000

LOG_DDL = """
CREATE TABLE IF NOT EXISTS operation_log (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  ts TEXT NOT NULL,
  action TEXT NOT NULL,
  entity_type TEXT,
  entity_id TEXT,
  payload_json TEXT,
  after_json TEXT,
  latency_ms INTEGER
);
CREATE INDEX IF NOT EXISTS idx_log_ts ON operation_log(ts);
CREATE INDEX IF NOT EXISTS idx_log_action ON operation_log(action);
CREATE INDEX IF NOT EXISTS idx_log_entity ON operation_log(entity_id);
"""


def setup_logging(level: Optional[str] = None):
    """Configure the root logger; level falls back to config.yaml log_level, then INFO."""
    name = (level or read_config_yaml().get("log_level") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def prune_logs(conn: Connection, keep: int = LOG_KEEP_ROWS) -> int:
    """Delete all but the newest ``keep`` audit rows; returns rows removed."""
    return conn.execute(
        """DELETE FROM operation_log WHERE id <= (
               SELECT id FROM operation_log ORDER BY id DESC LIMIT 1 OFFSET ?
           )""",
        (keep,),
    ).rowcount


def _dumps(obj) -> Optional[str]:
    return json.dumps(obj, ensure_ascii=False) if obj is not None else None


class LogContext:
    """
    Audit record for one successful mutation. The row is written on the
    caller's connection, so it lands under the same lock hold as the change
    itself; failed operations only reach the module logger.
    """

    def __init__(self, action: str, entity_type: Optional[str] = None, entity_id: Optional[str] = None):
        self.action = action
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.start = time.perf_counter()
        self.payload = None
        self.after = None

    def set_payload(self, obj): self.payload = obj
    def set_after(self, obj): self.after = obj

    def write(self, conn: Connection):
        elapsed_ms = int((time.perf_counter() - self.start) * 1000)
        rec = {
            "ts": dt.datetime.now(dt.timezone.utc).isoformat(timespec="microseconds"),
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "payload_json": _dumps(self.payload),
            "after_json": _dumps(self.after),
            "latency_ms": elapsed_ms,
        }
        try:
            conn.execute(
                """INSERT INTO operation_log
                (ts,action,entity_type,entity_id,payload_json,after_json,latency_ms)
                VALUES(:ts,:action,:entity_type,:entity_id,:payload_json,:after_json,:latency_ms)""",
                rec
            )
        except sqlite3.Error:
            # the mutation itself already succeeded
            logger.exception("operation_log write failed for %s", self.action)
        logger.debug("%s %s ok (%d ms)", self.action, self.entity_id or "", elapsed_ms)

    def fail(self, err: str):
        logger.warning("%s %s failed: %s", self.action, self.entity_id or "", err)


def search_logs(q: str | None = None, action: str | None = None, entity_id: str | None = None,
                ts_from: str | None = None, ts_to: str | None = None, page: int = 1, size: int = 50):
    """Newest first; returns (total, rows as dicts) for the requested page."""
    where = []
    params = {}
    if q:
        where.append("(payload_json LIKE :q OR after_json LIKE :q)")
        params["q"] = f"%{q}%"
    if action:
        where.append("action = :action")
        params["action"] = action
    if entity_id:
        where.append("entity_id = :entity_id")
        params["entity_id"] = entity_id
    if ts_from:
        where.append("ts >= :from")
        params["from"] = ts_from
    if ts_to:
        where.append("ts <= :to")
        params["to"] = ts_to
    wh = " WHERE " + " AND ".join(where) if where else ""
    with get_conn() as conn:
        total = conn.execute(f"SELECT COUNT(1) AS cnt FROM operation_log{wh}", params).fetchone()["cnt"]
        rows = conn.execute(
            f"SELECT * FROM operation_log{wh} ORDER BY id DESC LIMIT :limit OFFSET :offset",
            {**params, "limit": size, "offset": (page - 1) * size},
        ).fetchall()
        return total, [dict(r) for r in rows]
