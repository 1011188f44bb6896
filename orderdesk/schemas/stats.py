# orderdesk/schemas/stats.py
import uuid
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel

from orderdesk.schemas.order import OrderStatus, RequestType


class StatusCount(SQLModel):
    """
    Number of orders currently in a given status.
    """
    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
    order_count: int


class LatestOrderSummary(SQLModel):
    """
    Lightweight info for last N orders.
    """
    model_config = ConfigDict(extra="forbid")

    id: uuid.UUID
    order_code: str
    created_at: datetime
    request_type: RequestType
    customer_email: str
    status: OrderStatus


class AdminDashboardStats(SQLModel):
    """
    Full payload for admin dashboard.
    """
    model_config = ConfigDict(extra="forbid")

    total_orders: int
    open_quotes: int
    by_status: list[StatusCount]
    latest_orders: list[LatestOrderSummary]
