# orderdesk/schemas/message.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

SenderType = Literal["customer", "team"]

MAX_MESSAGE_LENGTH = 5000


class MessageCreate(SQLModel):
    """
    New timeline message. Sender identity comes from the token.
    """

    model_config = ConfigDict(extra="forbid")

    body: str = Field(max_length=MAX_MESSAGE_LENGTH)

    @field_validator("body", mode="before")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("message cannot be empty")
        return v


class MessageRead(SQLModel):
    id: uuid.UUID
    order_id: uuid.UUID
    sender_type: SenderType
    sender_email: str
    body: str
    created_at: datetime
