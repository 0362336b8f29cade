from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..domain.grocery_list_item import GroceryListItem
from ..logs import LogContext
from ..services.grocery_list_item_svc import GroceryListItemStore

router = APIRouter()

store = GroceryListItemStore()


class GroceryListItemBody(BaseModel):
    grocery_list_id: int
    product_id: int
    amount: int


@contextmanager
def _audited(action: str, item_id: Optional[int] = None) -> Iterator[LogContext]:
    """写接口公用：记审计行，并把异常映射为 HTTP 状态码"""
    with LogContext(action, item_id) as log:
        try:
            yield log
        except HTTPException:
            raise
        except ValueError as ve:
            raise HTTPException(status_code=400, detail=str(ve))
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/grocery-list-items")
def api_grocery_list_items():
    return {"items": [it.to_dict() for it in store.get_all()]}


@router.get("/api/grocery-lists/{grocery_list_id}/items")
def api_grocery_list_items_on_list(grocery_list_id: int):
    items = store.get_all_on_grocery_list_id(grocery_list_id)
    return {"items": [it.to_dict() for it in items]}


@router.get("/api/grocery-list-items/{item_id}")
def api_grocery_list_item_get(item_id: int):
    item = store.get(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="not_found")
    return item.to_dict()


@router.post("/api/grocery-list-items", status_code=201)
def api_grocery_list_item_create(body: GroceryListItemBody):
    with _audited("GROCERY_LIST_ITEM_CREATE") as log:
        item = store.add(GroceryListItem(**body.dict()))
        log.set_after(item)
    return item.to_dict()


@router.put("/api/grocery-list-items/{item_id}")
def api_grocery_list_item_update(item_id: int, body: GroceryListItemBody):
    with _audited("GROCERY_LIST_ITEM_UPDATE", item_id) as log:
        log.set_before(store.get(item_id))
        # 与 store.update 一致：id 不存在时原样返回，不新建
        item = store.update(GroceryListItem(id=item_id, **body.dict()))
        log.set_after(item)
    return item.to_dict()


@router.delete("/api/grocery-list-items/{item_id}")
def api_grocery_list_item_delete(item_id: int):
    with _audited("GROCERY_LIST_ITEM_DELETE", item_id) as log:
        removed = store.remove(item_id)
        if removed is None:
            raise HTTPException(status_code=404, detail="not_found")
        log.set_before(removed)
    return removed.to_dict()
