# orderdesk/services/lifecycle_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from orderdesk.core.errors import NotFound, OrderLocked, PaymentFailed, QuoteNotAcceptable
from orderdesk.core.payments import StubPaymentProcessor
from orderdesk.models.order import Order
from orderdesk.models.quote import Quote
from orderdesk.repositories.order_repo import OrderRepository
from orderdesk.repositories.quote_repo import QuoteRepository
from orderdesk.schemas.order import OrderDetailsUpdate, OrderStatusUpdate
from orderdesk.schemas.quote import QuoteCreate

logger = logging.getLogger(__name__)

QUOTED_STATUS = "Estimate Sent"
PAID_STATUS = "Payment Received"

# Customers may still adjust quantity / dates / notes until they pay
EDITABLE_STATUSES = frozenset({"In Estimating", "Need Info", "Estimate Sent"})


class LifecycleService:
    """
    Order status transitions.

    The lifecycle is advisory: admins may set any status at any time and no
    adjacency is enforced. Only two transitions carry side effects:

      - issue_quote:  new pending quote, older pending quotes superseded,
                      order -> "Estimate Sent" (from any status)
      - accept_quote: payment charged, quote -> accepted,
                      order -> "Payment Received"

    A plain status write never touches quotes.
    """

    def __init__(self, order_repo: OrderRepository, quote_repo: QuoteRepository):
        self.order_repo = order_repo
        self.quote_repo = quote_repo

    def _get_order(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if order is None:
            raise NotFound("Order not found")
        return order

    # -------- Admin operations --------

    def set_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> Order:
        order = self._get_order(session, order_id)
        if order.status == payload.status:
            return order

        logger.info(
            "Order %s status %s -> %s", order.order_code, order.status, payload.status
        )
        order.status = payload.status
        return self.order_repo.update(session, order)

    def issue_quote(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: QuoteCreate,
    ) -> Quote:
        order = self._get_order(session, order_id)

        for previous in self.quote_repo.list_pending_for_order(session, order.id):
            previous.status = "superseded"
            self.quote_repo.stage(session, previous)

        quote = Quote(
            order_id=order.id,
            amount_cents=payload.amount_cents,
            description=payload.description,
            valid_until=payload.valid_until,
            status="pending",
        )
        self.quote_repo.stage(session, quote)

        order.status = QUOTED_STATUS
        self.order_repo.stage(session, order)

        session.commit()
        session.refresh(quote)
        logger.info(
            "Quote %s issued for %s (%d cents)",
            quote.id,
            order.order_code,
            quote.amount_cents,
        )
        return quote

    # -------- Customer operations --------

    def accept_quote(
        self,
        session: Session,
        order: Order,
        quote_id: uuid.UUID,
        payments: StubPaymentProcessor,
    ) -> Quote:
        """
        Accept a pending quote and take payment.

        `order` must already be authorized for the caller.

        Raises:
            NotFound: quote missing or attached to another order.
            QuoteNotAcceptable: quote not pending, expired, or the order is
                not waiting on a quote.
            PaymentFailed: the charge was declined; nothing is changed.
        """
        quote = self.quote_repo.get_by_id(session, quote_id)
        if quote is None or quote.order_id != order.id:
            raise NotFound("Quote not found")

        if quote.status != "pending" or order.status != QUOTED_STATUS:
            raise QuoteNotAcceptable()

        now = datetime.now(timezone.utc)
        if quote.valid_until is not None and quote.valid_until < now.date():
            raise QuoteNotAcceptable("This quote has expired")

        result = payments.charge(order, quote)
        if not result.succeeded:
            logger.info(
                "Payment declined for %s: %s", order.order_code, result.failure_reason
            )
            raise PaymentFailed()

        quote.status = "accepted"
        quote.payment_reference = result.reference
        quote.accepted_at = now
        self.quote_repo.stage(session, quote)

        order.status = PAID_STATUS
        self.order_repo.stage(session, order)

        session.commit()
        session.refresh(quote)
        logger.info("Quote %s accepted for %s", quote.id, order.order_code)
        return quote

    def update_details(
        self,
        session: Session,
        order: Order,
        payload: OrderDetailsUpdate,
    ) -> Order:
        """
        Partial update of quantity / needed_by / notes.

        An empty string clears a field; omitted fields stay unchanged.
        """
        if order.status not in EDITABLE_STATUSES:
            raise OrderLocked()

        for name in payload.model_fields_set:
            value = getattr(payload, name)
            if value is None:
                continue
            setattr(order, name, value or None)

        return self.order_repo.update(session, order)
