"""
orderdesk.orders.models

Order record and request shapes.
"""

from __future__ import annotations

import enum
from datetime import datetime

from pydantic import BaseModel, Field

from orderdesk.storage.records import StoredRecord


class OrderStatus(enum.StrEnum):
    # Values are persisted and part of the public API.
    created = "created"
    processing = "processing"
    completed = "completed"
    cancelled = "cancelled"


class Order(StoredRecord):
    id: str
    title: str
    description: str = ""
    owner_id: str
    status: OrderStatus
    created_at: datetime
    updated_at: datetime


class OrderCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=1000)


class StatusUpdateRequest(BaseModel):
    status: OrderStatus
