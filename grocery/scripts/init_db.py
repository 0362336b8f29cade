"""
Create schemas (item_audit_log + grocery_list_item) and load demo seed rows.

Seed rows are only inserted into an empty grocery_list_item table.

Usage:
  python -m grocery.scripts.init_db [--db path/to/grocery.db] [--no-seed]
"""
from __future__ import annotations

import argparse
import os

from grocery.logs import LogContext, ensure_log_schema
from grocery.migrations.grocery_list_item_schema import bootstrap


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--db", default=None, help="SQLite path, overrides GROCERY_DB_PATH/config.yaml")
    ap.add_argument("--no-seed", action="store_true", help="only create tables")
    args = ap.parse_args(argv)

    if args.db:
        os.environ["GROCERY_DB_PATH"] = args.db

    ensure_log_schema()
    with LogContext("INIT_DB"):
        res = bootstrap(seed=not args.no_seed)
    out = {"message": "ok", **res}
    print(out)
    return out


if __name__ == "__main__":
    main()
