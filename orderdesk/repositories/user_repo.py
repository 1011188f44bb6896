import uuid

from sqlmodel import Session

from orderdesk.models.user import User


class UserRepository:
    """
    Data access layer for portal users.

    Rows are created on first sign-in and follow the token's email
    afterwards; roles are changed in the database directly.
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key (the Supabase auth id), or None."""
        return session.get(User, user_id)

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
