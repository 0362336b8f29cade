from __future__ import annotations

from fastapi import APIRouter, Query

from ..logs import search_logs

router = APIRouter()


@router.get("/api/grocery-list-items/audit/search")
def api_item_audit_search(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=200),
    action: str | None = None,
    item_id: int | None = None,
    grocery_list_id: int | None = None,
):
    total, items = search_logs(action, item_id, grocery_list_id, page, size)
    return {"total": total, "items": items}
