from __future__ import annotations

from fastapi import APIRouter

from ..db import get_conn
from ..repository import grocery_list_item_repo

APP_NAME = "grocery-list-api"
APP_VERSION = "0.1.0"

router = APIRouter()


@router.get("/health")
def health():
    # 能连上库并读到条目表才算健康
    with get_conn() as conn:
        items = grocery_list_item_repo.count_all(conn)
    return {"status": "ok", "items": items}


@router.get("/version")
def version():
    return {"app": APP_NAME, "version": APP_VERSION}
