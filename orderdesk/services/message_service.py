# orderdesk/services/message_service.py
import uuid

from sqlmodel import Session

from orderdesk.models.message import OrderMessage
from orderdesk.models.user import User
from orderdesk.repositories.message_repo import MessageRepository
from orderdesk.schemas.message import MessageCreate
from orderdesk.services.access_service import AccessService


class MessageService:
    """
    Order timeline messages between the customer and the shop.

    Access follows the order: the owner and admins only. Admin messages are
    sent as "team", everyone else's as "customer".
    """

    def __init__(self, access: AccessService, repo: MessageRepository):
        self.access = access
        self.repo = repo

    def list_messages(
        self,
        session: Session,
        caller: User,
        order_id: uuid.UUID,
    ) -> list[OrderMessage]:
        order = self.access.get_order(session, caller, order_id)
        return self.repo.list_for_order(session, order.id)

    def post_message(
        self,
        session: Session,
        caller: User,
        order_id: uuid.UUID,
        payload: MessageCreate,
    ) -> OrderMessage:
        order = self.access.get_order(session, caller, order_id)
        message = OrderMessage(
            order_id=order.id,
            sender_type="team" if caller.is_admin else "customer",
            sender_email=caller.email,
            body=payload.body,
        )
        return self.repo.create(session, message)
