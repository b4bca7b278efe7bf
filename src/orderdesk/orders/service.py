"""
orderdesk.orders.service

Orders service layer.

Responsibilities:
- Create orders owned by the caller (status forced to `created`).
- Read with owner-or-admin authorization.
- List with visibility scoping: "all orders" only for an admin who asks for it.
- Status updates through the state machine, evaluated inside the store's write lock.
"""

from __future__ import annotations

from typing import Any

from orderdesk.auth.models import Principal
from orderdesk.auth.policy import Capability, authorize
from orderdesk.errors import NotFound
from orderdesk.observability.logging import get_logger
from orderdesk.orders.listing import OrderQuery, page_payload
from orderdesk.orders.models import Order, OrderCreateRequest, OrderStatus
from orderdesk.orders.repository import OrderRepository
from orderdesk.orders.state_machine import TransitionPolicy, apply_transition
from orderdesk.storage.records import new_id, utcnow

log = get_logger(__name__)


class OrderService:
    def __init__(
        self,
        *,
        repo: OrderRepository,
        policy: TransitionPolicy = TransitionPolicy.terminal_lock,
    ) -> None:
        self._repo = repo
        self._policy = policy

    async def create(self, principal: Principal, body: OrderCreateRequest) -> Order:
        authorize(principal, Capability.authenticated)
        now = utcnow()
        order = Order(
            id=new_id(),
            title=body.title,
            description=body.description,
            owner_id=principal.subject,
            status=OrderStatus.created,
            created_at=now,
            updated_at=now,
        )
        await self._repo.create(order)
        # Best-effort event; not atomic with the write.
        log.info("order.created", order_id=order.id, owner_id=order.owner_id)
        return order

    async def get(self, principal: Principal, order_id: str) -> Order:
        order = await self._repo.get(order_id)
        if order is None:
            raise NotFound("Order not found")
        authorize(principal, Capability.owner_or_admin, owner_id=order.owner_id)
        return order

    async def list_visible(self, principal: Principal, query: OrderQuery) -> dict[str, Any]:
        authorize(principal, Capability.authenticated)
        owner_id = None if (principal.is_admin and query.include_all) else principal.subject
        items, total = await self._repo.list_orders(query, owner_id=owner_id)
        return page_payload(items, total=total, query=query)

    async def update_status(
        self, principal: Principal, order_id: str, requested: OrderStatus
    ) -> Order:
        previous: dict[str, OrderStatus] = {}

        def _transition(order: Order) -> Order:
            previous["status"] = order.status
            return apply_transition(order, requested, principal, policy=self._policy)

        updated = await self._repo.update(order_id, _transition)
        log.info(
            "order.status_changed",
            order_id=order_id,
            from_status=str(previous["status"]),
            to_status=str(updated.status),
            actor=principal.subject,
        )
        return updated
