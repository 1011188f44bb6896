# orderdesk/repositories/rate_limit_repo.py
from sqlmodel import Session, select

from orderdesk.models.rate_limit import OrderRateLimit


class RateLimitRepository:
    """
    Data access layer for order_rate_limits.
    """

    def get_by_identifier(
        self,
        session: Session,
        identifier: str,
    ) -> OrderRateLimit | None:
        stmt = select(OrderRateLimit).where(OrderRateLimit.identifier == identifier)
        return session.exec(stmt).first()

    def save(self, session: Session, record: OrderRateLimit) -> OrderRateLimit:
        session.add(record)
        session.commit()
        session.refresh(record)
        return record
