# orderdesk/models/rate_limit.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field

from orderdesk.models.order import utcnow


class OrderRateLimit(SQLModel, table=True):
    """
    Fixed-window submission counter, one row per identifier (customer email).
    Rows are created and updated by the rate limiter, never deleted.
    """

    __tablename__ = "order_rate_limits"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )

    identifier: str = Field(
        max_length=255,
        unique=True,
        index=True,
    )

    submission_count: int = Field(default=1, ge=0)

    window_start: datetime = Field(default_factory=utcnow)

    created_at: datetime = Field(default_factory=utcnow)
