"""
orderdesk.orders.listing

Query parsing for the order listing endpoint.

Responsibilities:
- Parse page/limit leniently and clamp them (page >= 1, 1 <= limit <= 100).
- Restrict sorting to a whitelist; unknown fields fall back to createdAt desc.
- Shape the paginated response.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from orderdesk.errors import ValidationFailed
from orderdesk.orders.models import Order, OrderStatus

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

# Public (camelCase) sort key -> record attribute.
SORT_FIELDS: dict[str, str] = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "status": "status",
    "title": "title",
}
DEFAULT_SORT = "createdAt"

_TRUE_FLAGS = {"1", "true"}


def _as_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


@dataclass(frozen=True, slots=True)
class OrderQuery:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    include_all: bool = False
    status: OrderStatus | None = None
    sort: str = DEFAULT_SORT
    descending: bool = True

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def sort_attr(self) -> str:
        return SORT_FIELDS[self.sort]

    @classmethod
    def from_params(
        cls,
        *,
        page: str | None = None,
        limit: str | None = None,
        all: str | None = None,
        status: str | None = None,
        sort: str | None = None,
        order: str | None = None,
    ) -> OrderQuery:
        status_filter: OrderStatus | None = None
        if status:
            try:
                status_filter = OrderStatus(status)
            except ValueError as e:
                raise ValidationFailed(f"Unknown status filter: {status}") from e

        if sort in SORT_FIELDS:
            sort_key, descending = sort, (order or "desc").lower() != "asc"
        else:
            sort_key, descending = DEFAULT_SORT, True

        return cls(
            page=max(1, _as_int(page, DEFAULT_PAGE)),
            limit=min(MAX_LIMIT, max(1, _as_int(limit, DEFAULT_LIMIT))),
            include_all=(all or "").lower() in _TRUE_FLAGS,
            status=status_filter,
            sort=sort_key,
            descending=descending,
        )


def page_payload(items: list[Order], *, total: int, query: OrderQuery) -> dict[str, Any]:
    return {
        "items": [o.to_record() for o in items],
        "page": query.page,
        "limit": query.limit,
        "total": total,
        "pageCount": max(1, math.ceil(total / query.limit)),
    }
