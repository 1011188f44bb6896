# orderdesk/repositories/stats_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from orderdesk.models.order import Order
from orderdesk.models.quote import Quote


class StatsRepository:
    """
    Read-only aggregated queries for admin dashboard.
    """

    def count_orders(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Order)
        # SQLModel's Session.exec() -> ScalarResult -> use .one()
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_pending_quotes(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Quote).where(Quote.status == "pending")
        value = session.exec(stmt).one()
        return int(value or 0)

    def orders_by_status(self, session: Session) -> list[tuple[str, int]]:
        stmt = (
            select(Order.status, func.count(Order.id))
            .group_by(Order.status)
        )
        return [(row[0], int(row[1])) for row in session.exec(stmt).all()]

    def latest_orders(self, session: Session, limit: int = 5) -> list[Order]:
        stmt = select(Order).order_by(Order.created_at.desc()).limit(limit)
        return session.exec(stmt).all()
