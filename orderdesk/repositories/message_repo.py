# orderdesk/repositories/message_repo.py
import uuid

from sqlmodel import Session, select

from orderdesk.models.message import OrderMessage


class MessageRepository:
    """
    Data access layer for order_messages (append-only).
    """

    def list_for_order(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> list[OrderMessage]:
        """Oldest first, as shown on the timeline."""
        stmt = (
            select(OrderMessage)
            .where(OrderMessage.order_id == order_id)
            .order_by(OrderMessage.created_at)
        )
        return session.exec(stmt).all()

    def create(self, session: Session, message: OrderMessage) -> OrderMessage:
        session.add(message)
        session.commit()
        session.refresh(message)
        return message
