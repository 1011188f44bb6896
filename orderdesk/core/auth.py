# orderdesk/core/auth.py
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from orderdesk.core.config import get_settings
from orderdesk.database import get_session
from orderdesk.models.user import User
from orderdesk.repositories.user_repo import UserRepository

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so public endpoints (intake, upload) can share the same dependency.
bearer_scheme = HTTPBearer(auto_error=False)

user_repo = UserRepository()


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def _default_name_from_email(email: str) -> str:
    return email.split("@", 1)[0][:50]


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the caller from a Supabase JWT (magic-link session).

    Flow:
      1. No Authorization header => guest => None.
      2. Decode JWT => extract 'sub' (auth user id) and 'email'.
      3. Find the portal profile in public.users.
      4. If missing, auto-provision it with role "user"; if the token
         carries a new email, update the profile.

    The stored email is lower-cased so it compares equal to the
    canonical customer_email on orders.

    Raises:
        HTTPException(401): if token is malformed or missing required claims.
    """
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    email = payload.get("email")

    if not sub or not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub/email",
        )

    try:
        sub_uuid = uuid.UUID(sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid sub in token",
        )

    user = user_repo.get_by_id(session, sub_uuid)
    email = email.strip().lower()

    # Email changes in Supabase Auth carry over on the next request
    if user is not None and user.email != email:
        user.email = email
        user = user_repo.update(session, user)

    # Default role = "user" (admin must be promoted in the database).
    if user is None:
        user = user_repo.create(
            session,
            User(
                id=sub_uuid,
                email=email,
                name=_default_name_from_email(email),
                role="user",
            ),
        )

    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """
    Enforce authentication.

    Raises:
        HTTPException(401): if user is None.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


def require_admin(user: User = Depends(require_auth)) -> User:
    """
    Enforce admin role.

    Raises:
        HTTPException(403): if role is not admin.
    """
    if user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
