import sqlite3

import pytest

from grocery.db import get_conn, run_in_transaction
from grocery.migrations.grocery_list_item_schema import SEED_ROWS, bootstrap, ensure_schema, seed_defaults
from grocery.repository import grocery_list_item_repo


def _rows(conn):
    return [
        (r["grocery_list_id"], r["product_id"], r["amount"])
        for r in grocery_list_item_repo.list_all(conn)
    ]


def test_seed_inserts_defaults_once():
    with get_conn() as conn:
        assert seed_defaults(conn) == 5
        assert seed_defaults(conn) == 0
        assert _rows(conn) == SEED_ROWS


def test_seed_skips_non_empty_table():
    with get_conn() as conn:
        grocery_list_item_repo.insert(conn, 9, 9, 9)
        assert seed_defaults(conn) == 0
        assert _rows(conn) == [(9, 9, 9)]


def test_bootstrap_is_idempotent(tmp_path):
    path = str(tmp_path / "fresh.db")
    assert bootstrap(path) == {"seeded": 5}
    assert bootstrap(path) == {"seeded": 0}
    with get_conn(path) as conn:
        assert grocery_list_item_repo.count_all(conn) == 5


def test_bootstrap_without_seed(tmp_path):
    path = str(tmp_path / "empty.db")
    assert bootstrap(path, seed=False) == {"seeded": 0}
    with get_conn(path) as conn:
        ensure_schema(conn)
        assert grocery_list_item_repo.count_all(conn) == 0


def test_run_in_transaction_rolls_back_on_error():
    stmts = [
        ("INSERT INTO grocery_list_item(grocery_list_id, product_id, amount) VALUES(?,?,?)", (1, 1, 1)),
        ("INSERT INTO grocery_list_item(grocery_list_id, product_id, amount) VALUES(?,?,?)", (1, None, 1)),
    ]
    with get_conn() as conn:
        with pytest.raises(sqlite3.IntegrityError):
            run_in_transaction(conn, stmts)
        assert grocery_list_item_repo.count_all(conn) == 0


def test_concurrent_bootstrap_seeds_once(tmp_path):
    from concurrent.futures import ThreadPoolExecutor

    path = str(tmp_path / "race.db")
    with ThreadPoolExecutor(max_workers=6) as ex:
        results = list(ex.map(lambda _: bootstrap(path), range(6)))

    assert sorted(r["seeded"] for r in results) == [0, 0, 0, 0, 0, 5]
    with get_conn(path) as conn:
        assert _rows(conn) == SEED_ROWS
