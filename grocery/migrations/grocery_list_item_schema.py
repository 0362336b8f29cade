#!/usr/bin/env python3
"""
Migration: create grocery_list_item table and load demo seed rows.

Run once at startup (api.on_startup / scripts.init_db), never from the store.
Seed rows are only inserted into an empty table, so repeated runs do not
duplicate them.
"""
from __future__ import annotations

import logging
from sqlite3 import Connection

from ..db import get_conn, transaction
from ..repository import grocery_list_item_repo

logger = logging.getLogger(__name__)

DDL = """
CREATE TABLE IF NOT EXISTS grocery_list_item (
  id INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT,
  grocery_list_id INTEGER NOT NULL,
  product_id INTEGER NOT NULL,
  amount INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_grocery_list_item_list ON grocery_list_item(grocery_list_id);
"""

# (grocery_list_id, product_id, amount)
SEED_ROWS = [
    (1, 1, 3),
    (1, 2, 1),
    (1, 3, 4),
    (2, 1, 2),
    (2, 2, 5),
]


def ensure_schema(conn: Connection):
    conn.executescript(DDL)


def seed_defaults(conn: Connection) -> int:
    """Insert SEED_ROWS when the table is empty. Returns rows inserted."""
    # 写锁下再判断是否为空，多个进程同时启动也只会播种一次
    with transaction(conn, immediate=True):
        if grocery_list_item_repo.count_all(conn) > 0:
            logger.debug("grocery_list_item not empty, skip seeding")
            return 0
        conn.executemany(
            "INSERT INTO grocery_list_item(grocery_list_id, product_id, amount) VALUES(?,?,?)",
            SEED_ROWS,
        )
    logger.info(f"seeded {len(SEED_ROWS)} grocery_list_item rows")
    return len(SEED_ROWS)


def bootstrap(db_path: str | None = None, seed: bool = True) -> dict:
    with get_conn(db_path) as conn:
        ensure_schema(conn)
        seeded = seed_defaults(conn) if seed else 0
    return {"seeded": seeded}
