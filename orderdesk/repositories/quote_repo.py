# orderdesk/repositories/quote_repo.py
import uuid

from sqlmodel import Session, select

from orderdesk.models.quote import Quote


class QuoteRepository:
    """
    Data access layer for quotes.

    No commits here; issuing and accepting a quote also change the order,
    so the lifecycle service commits both together.
    """

    def get_by_id(self, session: Session, quote_id: uuid.UUID) -> Quote | None:
        return session.get(Quote, quote_id)

    def list_for_order(self, session: Session, order_id: uuid.UUID) -> list[Quote]:
        """Newest first."""
        stmt = (
            select(Quote)
            .where(Quote.order_id == order_id)
            .order_by(Quote.created_at.desc())
        )
        return session.exec(stmt).all()

    def list_pending_for_order(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> list[Quote]:
        stmt = select(Quote).where(
            Quote.order_id == order_id,
            Quote.status == "pending",
        )
        return session.exec(stmt).all()

    def stage(self, session: Session, quote: Quote) -> Quote:
        session.add(quote)
        session.flush()
        return quote
