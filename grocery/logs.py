"""
购物清单条目的写操作审计。

每个写请求（以及启动/初始化）在 item_audit_log 里留一行：动作、条目 id、
所属清单、前后快照、结果和耗时。进程内的调试日志仍走 logging。
"""
from __future__ import annotations

import json, time, datetime as dt
from typing import Optional

from .db import get_conn
from .domain.grocery_list_item import GroceryListItem
from .repository.grocery_list_item_repo import row_key

DDL = """
CREATE TABLE IF NOT EXISTS item_audit_log (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  ts TEXT NOT NULL,
  action TEXT NOT NULL,
  item_id INTEGER,
  grocery_list_id INTEGER,
  before_json TEXT,
  after_json TEXT,
  result TEXT NOT NULL,
  err_msg TEXT,
  latency_ms INTEGER
);
CREATE INDEX IF NOT EXISTS idx_item_audit_item ON item_audit_log(item_id);
CREATE INDEX IF NOT EXISTS idx_item_audit_action ON item_audit_log(action);
"""


def ensure_log_schema():
    with get_conn() as conn:
        conn.executescript(DDL)


def _snapshot(item: Optional[GroceryListItem]) -> Optional[str]:
    return json.dumps(item.to_dict()) if item is not None else None


def _key(value) -> Optional[int]:
    return row_key(value) if value is not None else None


class LogContext:
    """
    一次写操作的审计记录。可直接调用 write()，也可当上下文管理器用：
    正常退出记 OK，抛异常记 ERROR（异常照常向外抛）。
    """

    def __init__(self, action: str, item_id: Optional[int] = None):
        self.action = action
        self.item_id = item_id
        self.grocery_list_id: Optional[int] = None
        self.before: Optional[GroceryListItem] = None
        self.after: Optional[GroceryListItem] = None
        self.start = time.perf_counter()

    def _track(self, item: Optional[GroceryListItem]):
        if item is None:
            return
        if item.id is not None:
            self.item_id = item.id
        self.grocery_list_id = item.grocery_list_id

    def set_before(self, item: Optional[GroceryListItem]):
        self.before = item
        self._track(item)

    def set_after(self, item: Optional[GroceryListItem]):
        self.after = item
        self._track(item)

    def write(self, result: str = "OK", err: Optional[str] = None):
        rec = {
            "ts": dt.datetime.now(dt.timezone.utc).isoformat(timespec="milliseconds"),
            "action": self.action,
            "item_id": _key(self.item_id),
            "grocery_list_id": _key(self.grocery_list_id),
            "before_json": _snapshot(self.before),
            "after_json": _snapshot(self.after),
            "result": result,
            "err_msg": err,
            "latency_ms": int((time.perf_counter() - self.start) * 1000),
        }
        with get_conn() as conn:
            conn.execute(
                """INSERT INTO item_audit_log
                (ts,action,item_id,grocery_list_id,before_json,after_json,result,err_msg,latency_ms)
                VALUES(:ts,:action,:item_id,:grocery_list_id,:before_json,:after_json,:result,:err_msg,:latency_ms)""",
                rec,
            )

    def __enter__(self) -> "LogContext":
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc is None:
            self.write("OK")
        else:
            # HTTPException 的可读信息在 detail 上
            self.write("ERROR", str(getattr(exc, "detail", exc)))
        return False


def search_logs(action: Optional[str], item_id: Optional[int], grocery_list_id: Optional[int], page: int, size: int):
    if (item_id is not None and _key(item_id) is None) or (grocery_list_id is not None and _key(grocery_list_id) is None):
        return 0, []
    where = []
    params: dict = {}
    if action:
        where.append("action = :action")
        params["action"] = action
    if item_id is not None:
        where.append("item_id = :item_id")
        params["item_id"] = item_id
    if grocery_list_id is not None:
        where.append("grocery_list_id = :grocery_list_id")
        params["grocery_list_id"] = grocery_list_id
    wh = " WHERE " + " AND ".join(where) if where else ""
    with get_conn() as conn:
        total = conn.execute(f"SELECT COUNT(1) AS cnt FROM item_audit_log{wh}", params).fetchone()["cnt"]
        rows = conn.execute(
            f"SELECT * FROM item_audit_log{wh} ORDER BY id DESC LIMIT :limit OFFSET :offset",
            {**params, "limit": size, "offset": (page - 1) * size},
        ).fetchall()
    return total, [dict(r) for r in rows]
