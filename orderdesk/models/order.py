# orderdesk/models/order.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Order(SQLModel, table=True):
    """
    Customer request (Estimate or Reorder).

    Fields are shared by both request types; which ones are populated
    depends on `request_type` (see schemas.order.OrderDraft).
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    # Assigned in the same INSERT as the row; never updated afterwards
    order_code: str = Field(
        max_length=32,
        unique=True,
        index=True,
        description="Human-facing order reference",
    )

    # Estimate | Reorder
    request_type: str = Field(index=True)

    # See schemas.order.ORDER_STATUSES
    status: str = Field(
        default="In Estimating",
        index=True,
        description="Order status lifecycle",
    )

    # Customer
    customer_email: str = Field(
        max_length=255,
        index=True,
        description="Lower-cased owner email; used for portal access",
    )
    customer_name: str | None = Field(default=None, max_length=100)
    company: str | None = Field(default=None, max_length=100)
    customer_phone: str | None = Field(default=None, max_length=20)

    # Estimate path
    offering: str | None = Field(default=None, max_length=100)
    material: str | None = Field(default=None, max_length=100)
    thickness: str | None = Field(default=None, max_length=50)
    custom_thickness: str | None = Field(default=None, max_length=50)
    material_sourcing: str | None = Field(default=None, max_length=50)
    material_spec_details: str | None = Field(default=None, max_length=2000)
    addons: list[str] | None = Field(default=None, sa_column=Column(JSON))
    callback_requested: bool = Field(default=False)
    preferred_method: str | None = Field(default=None, max_length=20)
    best_time: str | None = Field(default=None, max_length=20)
    file_link: str | None = Field(default=None, max_length=2000)

    # Reorder path
    part_id: str | None = Field(default=None, max_length=100)
    revision: str | None = Field(default=None, max_length=50)

    # Shared
    quantity: str | None = Field(default=None, max_length=50)
    finish: str | None = Field(default=None, max_length=50)
    needed_by: str | None = Field(default=None, max_length=20)
    delivery_method: str | None = Field(default=None, max_length=20)
    delivery_zip: str | None = Field(default=None, max_length=10)
    notes: str | None = Field(default=None, max_length=5000)

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last modification timestamp (UTC)",
    )


class OrderFile(SQLModel, table=True):
    """
    Drawing / photo attached to an order.

    Rows are only created after the blob upload succeeded and are never
    updated.
    """

    __tablename__ = "order_files"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
        description="FK to orders.id",
    )

    filename: str = Field(
        max_length=255,
        description="Original (validated) filename",
    )

    # orders/<order_id>/<filename>
    storage_path: str = Field(
        unique=True,
        index=True,
        description="Object key inside the uploads bucket",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )
