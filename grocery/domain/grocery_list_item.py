from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional
from sqlite3 import Row


@dataclass
class GroceryListItem:
    """购物清单条目：某个清单中某个商品的数量。id 由数据库分配。"""
    grocery_list_id: int
    product_id: int
    amount: int
    id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Row) -> "GroceryListItem":
        return cls(
            id=int(row["id"]),
            grocery_list_id=int(row["grocery_list_id"]),
            product_id=int(row["product_id"]),
            amount=int(row["amount"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
