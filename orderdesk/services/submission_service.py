# orderdesk/services/submission_service.py
import logging
from typing import Any, Callable

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from orderdesk.core.errors import InvalidInput, OrderCodeCollision, StorageError
from orderdesk.models.order import Order
from orderdesk.repositories.order_repo import OrderRepository
from orderdesk.schemas.order import INITIAL_STATUS, OrderDraft
from orderdesk.services.order_codes import generate_order_code
from orderdesk.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


def validate_order_payload(payload: Any) -> OrderDraft:
    """
    Turn an untyped intake payload into an OrderDraft.

    Raises:
        InvalidInput: with the first validation message (e.g.
            "Email is required", "Invalid phone format").
    """
    try:
        return OrderDraft.model_validate(payload)
    except ValidationError as exc:
        errors = exc.errors()
        message = errors[0]["msg"] if errors else "Invalid request body"
        logger.info("Order validation failed: %s", message)
        raise InvalidInput(message)


class SubmissionService:
    """
    Intake pipeline for new orders.

    Steps (each one aborts the rest):
      1. Validate and sanitize the payload        -> InvalidInput
      2. Count the submission for the email        -> RateLimited
      3. Insert the order with a fresh order_code  -> StorageError

    Collisions on order_code are retried with a new code up to
    `max_code_attempts` times. The confirmation email is not sent here;
    the router schedules it once the order row exists.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        rate_limiter: RateLimiter,
        code_prefix: str = "NMM",
        max_code_attempts: int = 3,
        code_generator: Callable[[str], str] = generate_order_code,
    ):
        self.order_repo = order_repo
        self.rate_limiter = rate_limiter
        self.code_prefix = code_prefix
        self.max_code_attempts = max_code_attempts
        self.code_generator = code_generator

    def submit(self, session: Session, payload: Any) -> Order:
        draft = validate_order_payload(payload)
        self.rate_limiter.check_and_record(session, draft.customer_email)

        order = self._insert_with_code(session, draft)
        logger.info("Order created successfully: %s", order.order_code)
        return order

    def _insert_with_code(self, session: Session, draft: OrderDraft) -> Order:
        fields = draft.model_dump()

        for attempt in range(1, self.max_code_attempts + 1):
            order = Order(
                **fields,
                order_code=self.code_generator(self.code_prefix),
                status=INITIAL_STATUS,
            )
            try:
                return self.order_repo.create(session, order)
            except OrderCodeCollision as exc:
                logger.warning(
                    "Order code %s already taken (attempt %d/%d)",
                    exc.order_code,
                    attempt,
                    self.max_code_attempts,
                )
            except SQLAlchemyError:
                logger.exception("Order insert error")
                raise StorageError("Failed to create order")

        logger.error(
            "Could not allocate a unique order code after %d attempts",
            self.max_code_attempts,
        )
        raise StorageError("Failed to create order")
