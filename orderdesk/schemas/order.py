# orderdesk/schemas/order.py
import re
import uuid
from datetime import datetime
from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError
from sqlmodel import SQLModel

from orderdesk.schemas.file import OrderFileRead
from orderdesk.schemas.message import MessageRead
from orderdesk.schemas.quote import QuoteRead

RequestType = Literal["Estimate", "Reorder"]
REQUEST_TYPES: tuple[str, ...] = get_args(RequestType)

# Display / progress order. Any status may be set directly by an admin.
OrderStatus = Literal[
    "In Estimating",
    "Need Info",
    "Estimate Sent",
    "Payment Received",
    "In Queue",
    "In Production",
    "Ready",
    "Delivered",
]
ORDER_STATUSES: tuple[str, ...] = get_args(OrderStatus)
INITIAL_STATUS: OrderStatus = "In Estimating"

MAX_EMAIL_LENGTH = 255
MAX_FILE_LINK_LENGTH = 2000
MAX_ADDONS = 20
MAX_ADDON_LENGTH = 100

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_REGEX = re.compile(r"^[0-9+\s().-]*$")

# Free-text fields are truncated, not rejected, past these lengths
TEXT_LIMITS: dict[str, int] = {
    "customer_name": 100,
    "company": 100,
    "customer_phone": 20,
    "offering": 100,
    "material": 100,
    "thickness": 50,
    "custom_thickness": 50,
    "quantity": 50,
    "finish": 50,
    "material_sourcing": 50,
    "material_spec_details": 2000,
    "preferred_method": 20,
    "best_time": 20,
    "part_id": 100,
    "revision": 50,
    "needed_by": 20,
    "delivery_method": 20,
    "delivery_zip": 10,
    "notes": 5000,
}

ESTIMATE_ONLY_FIELDS: tuple[str, ...] = (
    "offering",
    "material",
    "thickness",
    "custom_thickness",
    "material_sourcing",
    "material_spec_details",
    "addons",
    "preferred_method",
    "best_time",
    "file_link",
)
REORDER_ONLY_FIELDS: tuple[str, ...] = ("part_id", "revision")


def invalid(message: str) -> PydanticCustomError:
    """Validation error whose message is shown to the customer as-is."""
    return PydanticCustomError("invalid_input", message)


def clip_text(value: Any, limit: int) -> str | None:
    """
    Normalize a free-text value:
      - numbers are kept as their text form (quantity: 25 -> "25")
      - other non-strings and whitespace-only strings => None
      - cut to exactly `limit` characters, whitespace included

    Re-applying it to its own output is a no-op.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        return None
    return value[:limit]


class OrderDraft(SQLModel):
    """
    Canonical, sanitized form of an intake payload.

    Built from untyped JSON via `OrderDraft.model_validate(payload)`:
      - customer_email and request_type are required
      - unknown keys are dropped
      - free text is truncated to TEXT_LIMITS
      - email, phone charset, file_link length and add-ons shape are rejected
        when invalid
      - fields belonging to the other request type are cleared
    """

    model_config = ConfigDict(extra="ignore")

    request_type: RequestType
    customer_email: str

    customer_name: str | None = None
    company: str | None = None
    customer_phone: str | None = None

    offering: str | None = None
    material: str | None = None
    thickness: str | None = None
    custom_thickness: str | None = None
    material_sourcing: str | None = None
    material_spec_details: str | None = None
    addons: list[str] | None = None
    callback_requested: bool = False
    preferred_method: str | None = None
    best_time: str | None = None
    file_link: str | None = None

    part_id: str | None = None
    revision: str | None = None

    quantity: str | None = None
    finish: str | None = None
    needed_by: str | None = None
    delivery_method: str | None = None
    delivery_zip: str | None = None
    notes: str | None = None

    @model_validator(mode="before")
    @classmethod
    def require_identity(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise invalid("Invalid request body")

        email = data.get("customer_email")
        if not isinstance(email, str) or not email.strip():
            raise invalid("Email is required")

        if data.get("request_type") not in REQUEST_TYPES:
            raise invalid("Invalid request type")
        return data

    @field_validator("customer_email", mode="before")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if len(v) > MAX_EMAIL_LENGTH or not EMAIL_REGEX.match(v):
            raise invalid("Invalid email format")
        return v

    @field_validator("customer_phone", mode="before")
    @classmethod
    def normalize_phone(cls, v: Any) -> str | None:
        if not isinstance(v, str) or not v.strip():
            return None
        if not PHONE_REGEX.match(v):
            raise invalid("Invalid phone format")
        return clip_text(v, TEXT_LIMITS["customer_phone"])

    @field_validator(
        "customer_name",
        "company",
        "offering",
        "material",
        "thickness",
        "custom_thickness",
        "quantity",
        "finish",
        "material_sourcing",
        "material_spec_details",
        "preferred_method",
        "best_time",
        "part_id",
        "revision",
        "needed_by",
        "delivery_method",
        "delivery_zip",
        "notes",
        mode="before",
    )
    @classmethod
    def truncate_text(cls, v: Any, info: ValidationInfo) -> str | None:
        return clip_text(v, TEXT_LIMITS[info.field_name])

    @field_validator("file_link", mode="before")
    @classmethod
    def check_file_link(cls, v: Any) -> str | None:
        if not isinstance(v, str) or not v.strip():
            return None
        v = v.strip()
        if len(v) > MAX_FILE_LINK_LENGTH:
            raise invalid("File link too long (max 2000 characters)")
        return v

    @field_validator("addons", mode="before")
    @classmethod
    def normalize_addons(cls, v: Any) -> list[str] | None:
        if v is None:
            return None
        if not isinstance(v, list):
            raise invalid("Add-ons must be a list")
        cleaned = [clip_text(a, MAX_ADDON_LENGTH) for a in v if isinstance(a, str)]
        cleaned = [a for a in cleaned if a][:MAX_ADDONS]
        return cleaned or None

    @field_validator("callback_requested", mode="before")
    @classmethod
    def coerce_callback(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.strip().lower() in {"1", "true", "yes", "y", "on"}
        if isinstance(v, int):
            return v != 0
        return False

    @model_validator(mode="after")
    def scope_to_request_type(self) -> "OrderDraft":
        if self.request_type == "Estimate":
            for name in REORDER_ONLY_FIELDS:
                setattr(self, name, None)
            return self

        for name in ESTIMATE_ONLY_FIELDS:
            setattr(self, name, None)
        self.callback_requested = False

        if not self.part_id:
            raise invalid("Part ID is required for reorders")
        if not self.quantity:
            raise invalid("Quantity is required for reorders")
        return self


class OrderRead(SQLModel):
    """
    Full order representation for the portal and the admin dashboard.
    """

    id: uuid.UUID
    order_code: str
    request_type: RequestType
    status: OrderStatus

    customer_email: str
    customer_name: str | None
    company: str | None
    customer_phone: str | None

    offering: str | None
    material: str | None
    thickness: str | None
    custom_thickness: str | None
    material_sourcing: str | None
    material_spec_details: str | None
    addons: list[str] | None
    callback_requested: bool
    preferred_method: str | None
    best_time: str | None
    file_link: str | None

    part_id: str | None
    revision: str | None

    quantity: str | None
    finish: str | None
    needed_by: str | None
    delivery_method: str | None
    delivery_zip: str | None
    notes: str | None

    created_at: datetime
    updated_at: datetime


class OrderSummary(SQLModel):
    """
    Row in the customer's request list.
    """

    id: uuid.UUID
    order_code: str
    status: OrderStatus
    request_type: RequestType
    offering: str | None
    part_id: str | None
    customer_name: str | None
    company: str | None
    created_at: datetime


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus


class OrderDetailsUpdate(SQLModel):
    """
    Customer edits made while reviewing a quote.

    Same truncation rules as intake; an empty string clears the field.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: str | None = None
    needed_by: str | None = None
    notes: str | None = None

    @field_validator("quantity", "needed_by", "notes", mode="before")
    @classmethod
    def truncate_text(cls, v: Any, info: ValidationInfo) -> str | None:
        if v is None:
            return None
        # "" survives as "" so the service can tell "clear" from "unchanged"
        return clip_text(v, TEXT_LIMITS[info.field_name]) or ""


class SubmissionResult(BaseModel):
    """
    Wire response of the submission endpoint:
        {"success": true, "orderId": "...", "orderCode": "..."}
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    order_id: uuid.UUID
    order_code: str


class OrderDetailRead(SQLModel):
    """
    Everything the status page shows for one order.
    """

    order: OrderRead
    files: list[OrderFileRead]
    quotes: list[QuoteRead]
    messages: list[MessageRead]
