from __future__ import annotations

# grocery/db.py
import sqlite3
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Sequence
import os
import yaml

# DB 路径解析顺序：
# 1) 环境变量 GROCERY_DB_PATH（最高优先级）
# 2) config.yaml 的 test_db_path（当检测到测试环境时）
# 3) config.yaml 的 db_path（生产默认）
# 4) 兜底：项目根 grocery.db
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
_ROOT_DB = os.path.join(_PROJECT_ROOT, "grocery.db")


def _read_config_yaml() -> dict:
    cfg_path = os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(cfg, dict):
        return {}
    out: dict[str, Any] = {}
    for k in ("db_path", "test_db_path"):
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = v.strip()
    if isinstance(cfg.get("seed_demo_data"), bool):
        out["seed_demo_data"] = cfg["seed_demo_data"]
    return out


def seed_demo_data_enabled() -> bool:
    """config.yaml 的 seed_demo_data，缺省为 True"""
    return _read_config_yaml().get("seed_demo_data", True)


def get_db_path(_: str | None = None) -> str:
    env_path = os.environ.get("GROCERY_DB_PATH")
    cfg = _read_config_yaml()
    cfg_db = cfg.get("db_path")
    cfg_test = cfg.get("test_db_path")
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)

    if env_path:
        path = env_path
    elif is_test and cfg_test:
        path = cfg_test
    elif cfg_db:
        path = cfg_db
    else:
        path = _ROOT_DB

    # 确保目录存在
    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    获取 SQLite 连接。优先使用显式传入的 db_path，否则走 get_db_path()。
    autocommit 模式，row_factory 为 Row；退出时关闭连接。
    """
    path = db_path or get_db_path()
    conn = sqlite3.connect(
        path,
        detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
        check_same_thread=False,
        isolation_level=None,
    )
    try:
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(conn: sqlite3.Connection, immediate: bool = False) -> Iterator[sqlite3.Connection]:
    """
    显式事务：正常退出 COMMIT，异常 ROLLBACK 后抛出。
    immediate=True 时一开始就拿写锁，适合“先查后写”。
    """
    conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
    try:
        yield conn
    except Exception:
        conn.execute("ROLLBACK")
        raise
    conn.execute("COMMIT")


def run_in_transaction(conn: sqlite3.Connection, statements: Iterable[tuple[str, Sequence[Any]]]) -> int:
    """
    在单个事务中依次执行 (sql, params)，任一失败则整体回滚并抛出。
    返回执行的语句数。
    """
    executed = 0
    with transaction(conn):
        for sql, params in statements:
            conn.execute(sql, params)
            executed += 1
    return executed
