"""
orderdesk.orders.state_machine

Order status transitions gated by role and ownership.

Responsibilities:
- Decide whether a caller may move an order from its current status to a
  requested one, raising `Forbidden` / `Conflict` otherwise.
- Produce the updated order (status + refreshed `updatedAt`).

Rules, in evaluation order:
1. Caller must own the order or be admin (`Forbidden`).
2. A completed order is locked for everyone, admins included (`Conflict`, STATUS_LOCKED).
3. Non-admin owners may only request `cancelled` (`Forbidden`).
4. Under the `adjacency` policy the move must also be an edge of
   `ADJACENCY` (`Conflict`, INVALID_TRANSITION). Under the default
   `terminal_lock` policy admins may set any status.
"""

from __future__ import annotations

import enum
from datetime import datetime

from orderdesk.auth.models import Principal
from orderdesk.auth.policy import Capability, authorize
from orderdesk.errors import Conflict, Forbidden
from orderdesk.orders.models import Order, OrderStatus
from orderdesk.storage.records import utcnow


class TransitionPolicy(enum.StrEnum):
    terminal_lock = "terminal_lock"
    adjacency = "adjacency"


ADJACENCY: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.created: frozenset({OrderStatus.processing, OrderStatus.cancelled}),
    OrderStatus.processing: frozenset({OrderStatus.completed, OrderStatus.cancelled}),
}

TERMINAL_LOCKED = OrderStatus.completed


def check_transition(
    order: Order,
    requested: OrderStatus,
    principal: Principal,
    *,
    policy: TransitionPolicy = TransitionPolicy.terminal_lock,
) -> None:
    authorize(principal, Capability.owner_or_admin, owner_id=order.owner_id)

    if order.status == TERMINAL_LOCKED:
        raise Conflict("Completed order cannot be changed", code="STATUS_LOCKED")

    if not principal.is_admin and requested != OrderStatus.cancelled:
        raise Forbidden("Owner can only set status to cancelled")

    if policy is TransitionPolicy.adjacency and requested not in ADJACENCY.get(
        order.status, frozenset()
    ):
        raise Conflict(
            f"Transition {order.status} -> {requested} is not allowed",
            code="INVALID_TRANSITION",
        )


def apply_transition(
    order: Order,
    requested: OrderStatus,
    principal: Principal,
    *,
    policy: TransitionPolicy = TransitionPolicy.terminal_lock,
    now: datetime | None = None,
) -> Order:
    check_transition(order, requested, principal, policy=policy)
    return order.model_copy(update={"status": requested, "updated_at": now or utcnow()})
