"""
购物清单条目服务层

GroceryListItemStore 把 CRUD 操作翻译成对 grocery_list_item 表的 SQL。
每次调用独立地 打开连接 -> 执行 -> 关闭，不缓存任何行。
表结构与种子数据由 migrations.grocery_list_item_schema 负责。
"""
from __future__ import annotations

import logging
from typing import List, Optional

from ..db import get_conn, transaction
from ..domain.grocery_list_item import GroceryListItem
from ..repository import grocery_list_item_repo

logger = logging.getLogger(__name__)


class GroceryListItemStore:

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    def get_all(self) -> List[GroceryListItem]:
        with get_conn(self.db_path) as conn:
            rows = grocery_list_item_repo.list_all(conn)
        logger.debug(f"get_all: {len(rows)} rows")
        return [GroceryListItem.from_row(r) for r in rows]

    def get_all_on_grocery_list_id(self, grocery_list_id: int) -> List[GroceryListItem]:
        with get_conn(self.db_path) as conn:
            rows = grocery_list_item_repo.list_by_grocery_list(conn, grocery_list_id)
        logger.debug(f"get_all_on_grocery_list_id({grocery_list_id}): {len(rows)} rows")
        return [GroceryListItem.from_row(r) for r in rows]

    def add(self, item: GroceryListItem) -> GroceryListItem:
        """
        插入条目，并把数据库分配的 id 写回传入对象后返回。

        id 取自同一连接上插入游标的 lastrowid。
        """
        with get_conn(self.db_path) as conn:
            new_id = grocery_list_item_repo.insert(
                conn, item.grocery_list_id, item.product_id, item.amount
            )
            conn.commit()
        item.id = new_id
        logger.debug(f"add: id={new_id}")
        return item

    def get(self, item_id: int) -> Optional[GroceryListItem]:
        with get_conn(self.db_path) as conn:
            row = grocery_list_item_repo.get_one(conn, item_id)
        logger.debug(f"get({item_id}): {'hit' if row else 'miss'}")
        return GroceryListItem.from_row(row) if row else None

    def update(self, item: GroceryListItem) -> GroceryListItem:
        """
        按 id 覆盖 grocery_list_id / product_id / amount。

        无论是否命中行都原样返回 item；id 不存在时不会新建行。
        """
        with get_conn(self.db_path) as conn:
            affected = grocery_list_item_repo.update(
                conn, item.id, item.grocery_list_id, item.product_id, item.amount
            )
            conn.commit()
        logger.debug(f"update: id={item.id} affected={affected}")
        if affected == 0:
            logger.warning(f"update: no grocery_list_item with id={item.id}")
        return item

    def delete(self, item: GroceryListItem) -> Optional[GroceryListItem]:
        """按 id 删除，总是返回传入的 item。"""
        with get_conn(self.db_path) as conn:
            affected = grocery_list_item_repo.delete(conn, item.id)
            conn.commit()
        logger.debug(f"delete: id={item.id} affected={affected}")
        if affected == 0:
            logger.warning(f"delete: no grocery_list_item with id={item.id}")
        return item

    def remove(self, item_id: int) -> Optional[GroceryListItem]:
        """
        读取并删除指定 id 的行，二者在同一个写事务里完成。
        返回被删除的条目；没有该行时返回 None。
        """
        with get_conn(self.db_path) as conn:
            with transaction(conn, immediate=True):
                row = grocery_list_item_repo.get_one(conn, item_id)
                affected = grocery_list_item_repo.delete(conn, item_id) if row else 0
        logger.debug(f"remove: id={item_id} affected={affected}")
        return GroceryListItem.from_row(row) if affected else None
