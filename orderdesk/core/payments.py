# orderdesk/core/payments.py
import logging
import uuid
from dataclasses import dataclass

from orderdesk.models.order import Order
from orderdesk.models.quote import Quote

logger = logging.getLogger(__name__)


@dataclass
class PaymentResult:
    succeeded: bool
    reference: str | None = None
    failure_reason: str | None = None


class StubPaymentProcessor:
    """
    Placeholder for the card checkout.

    Always succeeds and hands back a local reference. Swap for a real
    processor by overriding `get_payment_processor`; the lifecycle service
    only looks at `PaymentResult`.
    """

    def charge(self, order: Order, quote: Quote) -> PaymentResult:
        reference = f"stub_{uuid.uuid4().hex[:16]}"
        logger.info(
            "Stub payment of %s cents for order %s (ref %s)",
            quote.amount_cents,
            order.order_code,
            reference,
        )
        return PaymentResult(succeeded=True, reference=reference)


def get_payment_processor() -> StubPaymentProcessor:
    return StubPaymentProcessor()
