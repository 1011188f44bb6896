# orderdesk/schemas/quote.py
import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

QuoteStatus = Literal["pending", "accepted", "superseded"]


class QuoteCreate(SQLModel):
    """
    Admin payload for issuing a quote.

    Issuing always moves the order to "Estimate Sent".
    """

    model_config = ConfigDict(extra="forbid")

    amount_cents: int = Field(gt=0, description="Quoted amount in cents")
    description: str | None = Field(default=None, max_length=2000)
    valid_until: date | None = None

    @field_validator("description")
    @classmethod
    def normalize_description(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class QuoteRead(SQLModel):
    id: uuid.UUID
    order_id: uuid.UUID
    amount_cents: int
    description: str | None
    valid_until: date | None
    status: QuoteStatus
    payment_reference: str | None
    accepted_at: datetime | None
    created_at: datetime
