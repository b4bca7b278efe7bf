"""
orderdesk.orders.repository

Order store.

Responsibilities:
- Define the repository interface the service depends on (create/get/list/update).
- Provide the JSON-file implementation (load -> mutate -> atomic replace under lock).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from orderdesk.errors import NotFound
from orderdesk.orders.listing import OrderQuery
from orderdesk.orders.models import Order
from orderdesk.storage.json_file import JsonCollection


class OrderRepository(Protocol):
    async def create(self, order: Order) -> Order: ...

    async def get(self, order_id: str) -> Order | None: ...

    async def list_orders(
        self, query: OrderQuery, *, owner_id: str | None
    ) -> tuple[list[Order], int]: ...

    async def update(self, order_id: str, mutate: Callable[[Order], Order]) -> Order: ...


class JsonOrderRepo:
    def __init__(self, collection: JsonCollection) -> None:
        self._collection = collection

    async def create(self, order: Order) -> Order:
        async with self._collection.mutate() as records:
            records.append(order.to_record())
        return order

    async def get(self, order_id: str) -> Order | None:
        for r in await self._collection.read_all():
            if r.get("id") == order_id:
                return Order.model_validate(r)
        return None

    async def list_orders(
        self, query: OrderQuery, *, owner_id: str | None
    ) -> tuple[list[Order], int]:
        """
        `owner_id=None` means every order is visible; the caller decides that.
        """

        orders = [Order.model_validate(r) for r in await self._collection.read_all()]
        if owner_id is not None:
            orders = [o for o in orders if o.owner_id == owner_id]
        if query.status is not None:
            orders = [o for o in orders if o.status == query.status]

        attr = query.sort_attr
        orders.sort(
            key=lambda o: _sort_value(getattr(o, attr)),
            reverse=query.descending,
        )
        total = len(orders)
        return orders[query.offset : query.offset + query.limit], total

    async def update(self, order_id: str, mutate: Callable[[Order], Order]) -> Order:
        # `mutate` runs inside the write lock; if it raises, nothing is persisted.
        async with self._collection.mutate() as records:
            for idx, r in enumerate(records):
                if r.get("id") == order_id:
                    updated = mutate(Order.model_validate(r))
                    records[idx] = updated.to_record()
                    return updated
            raise NotFound("Order not found")


def _sort_value(value: object) -> object:
    if isinstance(value, str):
        return value.casefold()
    return value
