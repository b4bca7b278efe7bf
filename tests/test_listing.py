from __future__ import annotations

import pytest

from orderdesk.errors import ValidationFailed
from orderdesk.orders.listing import MAX_LIMIT, OrderQuery
from orderdesk.orders.models import OrderStatus


def test_defaults() -> None:
    q = OrderQuery.from_params()

    assert (q.page, q.limit, q.offset) == (1, 10, 0)
    assert q.sort == "createdAt" and q.descending
    assert not q.include_all


@pytest.mark.parametrize(
    ("page", "limit", "expected"),
    [
        ("0", "1000", (1, MAX_LIMIT)),
        ("-3", "0", (1, 1)),
        ("abc", "", (1, 10)),
        ("3", "25", (3, 25)),
    ],
)
def test_page_and_limit_are_clamped(page, limit, expected) -> None:
    q = OrderQuery.from_params(page=page, limit=limit)

    assert (q.page, q.limit) == expected


def test_unknown_sort_falls_back_to_created_desc() -> None:
    q = OrderQuery.from_params(sort="ownerId", order="asc")

    assert q.sort == "createdAt"
    assert q.descending


def test_whitelisted_sort_and_flags() -> None:
    q = OrderQuery.from_params(sort="title", order="ASC", all="true", status="processing")

    assert q.sort_attr == "title"
    assert not q.descending
    assert q.include_all
    assert q.status == OrderStatus.processing


def test_unknown_status_filter_is_rejected() -> None:
    with pytest.raises(ValidationFailed):
        OrderQuery.from_params(status="shipped")
