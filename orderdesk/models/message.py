# orderdesk/models/message.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field

from orderdesk.models.order import utcnow


class OrderMessage(SQLModel, table=True):
    """
    Append-only note on an order's timeline.
    """

    __tablename__ = "order_messages"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    # customer | team
    sender_type: str = Field(max_length=20)

    sender_email: str = Field(max_length=255)

    body: str = Field(max_length=5000)

    created_at: datetime = Field(
        default_factory=utcnow,
        index=True,
        description="Creation timestamp (UTC)",
    )
