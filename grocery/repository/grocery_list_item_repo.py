from __future__ import annotations

from sqlite3 import Connection
from typing import Optional

_COLUMNS = "id, grocery_list_id, product_id, amount"

# SQLite INTEGER 为有符号 64 位
_SQLITE_INT_MIN = -(2 ** 63)
_SQLITE_INT_MAX = 2 ** 63 - 1


def row_key(value) -> Optional[int]:
    """转成 int；超出 SQLite INTEGER 范围的值不可能命中任何行，返回 None"""
    key = int(value)
    if key < _SQLITE_INT_MIN or key > _SQLITE_INT_MAX:
        return None
    return key


def list_all(conn: Connection):
    return conn.execute(
        f"SELECT {_COLUMNS} FROM grocery_list_item ORDER BY id"
    ).fetchall()


def list_by_grocery_list(conn: Connection, grocery_list_id: int):
    key = row_key(grocery_list_id)
    if key is None:
        return []
    return conn.execute(
        f"SELECT {_COLUMNS} FROM grocery_list_item WHERE grocery_list_id=? ORDER BY id",
        (key,),
    ).fetchall()


def get_one(conn: Connection, item_id: int):
    key = row_key(item_id)
    if key is None:
        return None
    return conn.execute(
        f"SELECT {_COLUMNS} FROM grocery_list_item WHERE id=?",
        (key,),
    ).fetchone()


def insert(conn: Connection, grocery_list_id: int, product_id: int, amount: int) -> int:
    cur = conn.execute(
        "INSERT INTO grocery_list_item(grocery_list_id, product_id, amount) VALUES(?,?,?)",
        (grocery_list_id, product_id, amount),
    )
    return int(cur.lastrowid)


def update(conn: Connection, item_id: int, grocery_list_id: int, product_id: int, amount: int) -> int:
    key = row_key(item_id)
    if key is None:
        return 0
    cur = conn.execute(
        "UPDATE grocery_list_item SET grocery_list_id=?, product_id=?, amount=? WHERE id=?",
        (grocery_list_id, product_id, amount, key),
    )
    return cur.rowcount


def delete(conn: Connection, item_id: int) -> int:
    key = row_key(item_id)
    if key is None:
        return 0
    cur = conn.execute("DELETE FROM grocery_list_item WHERE id=?", (key,))
    return cur.rowcount


def count_all(conn: Connection) -> int:
    return int(conn.execute("SELECT COUNT(1) AS c FROM grocery_list_item").fetchone()["c"])
