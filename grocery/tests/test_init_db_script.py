from grocery.db import get_conn
from grocery.repository import grocery_list_item_repo
from grocery.scripts import init_db


def test_init_db_seeds_once(tmp_path, monkeypatch):
    path = str(tmp_path / "cli.db")
    # main() 会写 GROCERY_DB_PATH，交给 monkeypatch 还原
    monkeypatch.setenv("GROCERY_DB_PATH", path)

    out = init_db.main(["--db", path])
    assert out == {"message": "ok", "seeded": 5}
    assert init_db.main(["--db", path])["seeded"] == 0

    with get_conn(path) as conn:
        assert grocery_list_item_repo.count_all(conn) == 5
        logs = conn.execute("SELECT result FROM item_audit_log WHERE action='INIT_DB'").fetchall()
        assert [r["result"] for r in logs] == ["OK", "OK"]


def test_init_db_no_seed(tmp_path, monkeypatch):
    path = str(tmp_path / "cli_empty.db")
    monkeypatch.setenv("GROCERY_DB_PATH", path)

    assert init_db.main(["--db", path, "--no-seed"])["seeded"] == 0
    with get_conn(path) as conn:
        assert grocery_list_item_repo.count_all(conn) == 0
