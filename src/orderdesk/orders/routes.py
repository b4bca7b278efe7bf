"""
orderdesk.orders.routes

HTTP surface of the orders service (mounted behind the gateway at `/v1/orders`).
Every route requires an identity (gateway header or bearer token).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from starlette.status import HTTP_201_CREATED

from orderdesk.api.envelope import success
from orderdesk.auth.deps import get_principal
from orderdesk.auth.models import Principal
from orderdesk.orders.listing import OrderQuery
from orderdesk.orders.models import OrderCreateRequest, StatusUpdateRequest
from orderdesk.orders.service import OrderService
from orderdesk.validation import parse_model, require_valid

router = APIRouter(tags=["orders"])


def orders_service(request: Request) -> OrderService:
    return request.app.state.orders  # type: ignore[no-any-return]


@router.post("/", status_code=HTTP_201_CREATED)
async def create_order(
    payload: Any = Body(default=None),
    principal: Principal = Depends(get_principal),
    svc: OrderService = Depends(orders_service),
) -> dict[str, Any]:
    body = require_valid(parse_model(OrderCreateRequest, payload))
    order = await svc.create(principal, body)
    return success(order.to_record())


@router.get("/")
async def list_orders(
    page: str | None = None,
    limit: str | None = None,
    all: str | None = None,
    status: str | None = None,
    sort: str | None = None,
    order: str | None = None,
    principal: Principal = Depends(get_principal),
    svc: OrderService = Depends(orders_service),
) -> dict[str, Any]:
    # Numbers are parsed leniently and clamped; bad values never fail the request.
    query = OrderQuery.from_params(
        page=page, limit=limit, all=all, status=status, sort=sort, order=order
    )
    return success(await svc.list_visible(principal, query))


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    principal: Principal = Depends(get_principal),
    svc: OrderService = Depends(orders_service),
) -> dict[str, Any]:
    order = await svc.get(principal, order_id)
    return success(order.to_record())


@router.patch("/{order_id}/status")
async def update_status(
    order_id: str,
    payload: Any = Body(default=None),
    principal: Principal = Depends(get_principal),
    svc: OrderService = Depends(orders_service),
) -> dict[str, Any]:
    body = require_valid(parse_model(StatusUpdateRequest, payload))
    order = await svc.update_status(principal, order_id, body.status)
    return success(order.to_record())
