# orderdesk/services/access_service.py
import logging
import uuid

from sqlmodel import Session

from orderdesk.core.errors import Forbidden, InvalidInput, NotFound, StorageError
from orderdesk.core.storage_utils import BlobStorage, order_id_from_path
from orderdesk.models.order import Order
from orderdesk.models.user import User
from orderdesk.repositories.file_repo import FileRepository
from orderdesk.repositories.message_repo import MessageRepository
from orderdesk.repositories.order_repo import OrderRepository
from orderdesk.repositories.quote_repo import QuoteRepository
from orderdesk.schemas.file import OrderFileRead
from orderdesk.schemas.message import MessageRead
from orderdesk.schemas.order import OrderDetailRead, OrderRead
from orderdesk.schemas.quote import QuoteRead

logger = logging.getLogger(__name__)


def can_access(caller: User, order: Order) -> bool:
    """
    Admins see every order; customers only the ones submitted with the
    email they signed in with.
    """
    if caller.is_admin:
        return True
    return order.customer_email == caller.email.strip().lower()


class AccessService:
    """
    Read gateway for orders and their files.

    "Exists but not yours" and "does not exist" produce the same error, so
    a customer cannot probe for other people's order ids or file keys.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        file_repo: FileRepository,
        quote_repo: QuoteRepository,
        message_repo: MessageRepository,
    ):
        self.order_repo = order_repo
        self.file_repo = file_repo
        self.quote_repo = quote_repo
        self.message_repo = message_repo

    # -------- Orders --------

    def get_order(self, session: Session, caller: User, order_id: uuid.UUID) -> Order:
        """
        Raises:
            NotFound: missing order, or an order the caller may not see.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if order is None or not can_access(caller, order):
            raise NotFound("Order not found")
        return order

    def list_my_orders(
        self,
        session: Session,
        caller: User,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        return self.order_repo.list_for_email(
            session, caller.email.strip().lower(), skip, limit
        )

    def list_all_orders(
        self,
        session: Session,
        status: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        """Admin listing; the router enforces the role."""
        return self.order_repo.list_all(session, status=status, skip=skip, limit=limit)

    def get_order_detail(
        self,
        session: Session,
        caller: User,
        order_id: uuid.UUID,
    ) -> OrderDetailRead:
        order = self.get_order(session, caller, order_id)
        return OrderDetailRead(
            order=OrderRead.model_validate(order),
            files=[
                OrderFileRead.model_validate(f)
                for f in self.file_repo.list_for_order(session, order.id)
            ],
            quotes=[
                QuoteRead.model_validate(q)
                for q in self.quote_repo.list_for_order(session, order.id)
            ],
            messages=[
                MessageRead.model_validate(m)
                for m in self.message_repo.list_for_order(session, order.id)
            ],
        )

    # -------- Files --------

    def signed_url_for(
        self,
        session: Session,
        caller: User,
        storage_path: str | None,
        storage: BlobStorage,
        expires_in: int,
    ) -> str:
        """
        Short-lived download link for an attachment.

        The owning order comes from the file record when there is one,
        otherwise from the key layout orders/<order_id>/<filename>.

        Raises:
            InvalidInput: storage_path missing.
            Forbidden: unknown key, unknown order, or not the caller's order.
            StorageError: the bucket refused to sign the URL.
        """
        if not storage_path:
            raise InvalidInput("storage_path required")

        record = self.file_repo.get_by_storage_path(session, storage_path)
        if record is not None:
            order_id = record.order_id
        else:
            raw_id = order_id_from_path(storage_path)
            try:
                order_id = uuid.UUID(raw_id) if raw_id else None
            except ValueError:
                order_id = None

        order = self.order_repo.get_by_id(session, order_id) if order_id else None
        if order is None or not can_access(caller, order):
            raise Forbidden()

        try:
            return storage.create_signed_url(storage_path, expires_in)
        except Exception:
            logger.exception("Signed URL error for %s", storage_path)
            raise StorageError("Could not create download link")
