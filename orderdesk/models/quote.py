# orderdesk/models/quote.py
import uuid
from datetime import date, datetime

from sqlmodel import SQLModel, Field

from orderdesk.models.order import utcnow


class Quote(SQLModel, table=True):
    """
    Priced estimate issued by the shop for an order.
    """

    __tablename__ = "quotes"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    amount_cents: int = Field(
        gt=0,
        description="Quoted amount in cents",
    )

    description: str | None = Field(default=None, max_length=2000)

    valid_until: date | None = Field(default=None)

    # pending | accepted | superseded
    status: str = Field(
        default="pending",
        index=True,
    )

    payment_reference: str | None = Field(
        default=None,
        description="Reference returned by the payment processor on acceptance",
    )

    accepted_at: datetime | None = Field(default=None)

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )
