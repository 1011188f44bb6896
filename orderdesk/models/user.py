# orderdesk/models/user.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field

from orderdesk.models.order import utcnow


class User(SQLModel, table=True):
    """
    Portal identity mirrored from Supabase Auth.

    Identity:
      - id: MUST match Supabase auth.users.id (UUID from JWT "sub")
      - email: the address the magic link was sent to; customers see the
        orders whose customer_email matches it

    Role:
      - "user" | "admin"
      - admins are promoted directly in the database
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches Supabase auth.users.id",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Email from Supabase auth.users (lower-cased)",
    )

    name: str = Field(
        max_length=50,
        description="Display name; first part of email by default",
    )

    # Application role (not Supabase RLS role)
    role: str = Field(
        default="user",
        index=True,
        description="Application role: user | admin",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
