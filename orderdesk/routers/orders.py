# orderdesk/routers/orders.py
import uuid
from datetime import timedelta
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Body, Depends
from sqlmodel import Session

from orderdesk.core.auth import require_auth
from orderdesk.core.config import get_settings
from orderdesk.core.payments import StubPaymentProcessor, get_payment_processor
from orderdesk.database import get_session
from orderdesk.models.user import User
from orderdesk.repositories.file_repo import FileRepository
from orderdesk.repositories.message_repo import MessageRepository
from orderdesk.repositories.order_repo import OrderRepository
from orderdesk.repositories.quote_repo import QuoteRepository
from orderdesk.repositories.rate_limit_repo import RateLimitRepository
from orderdesk.schemas.file import OrderFileRead
from orderdesk.schemas.message import MessageCreate, MessageRead
from orderdesk.schemas.order import (
    OrderDetailRead,
    OrderDetailsUpdate,
    OrderRead,
    OrderSummary,
    SubmissionResult,
)
from orderdesk.schemas.quote import QuoteRead
from orderdesk.services.access_service import AccessService
from orderdesk.services.lifecycle_service import LifecycleService
from orderdesk.services.message_service import MessageService
from orderdesk.services.notification_service import OrderNotifier, get_notifier
from orderdesk.services.rate_limiter import RateLimiter
from orderdesk.services.submission_service import SubmissionService

settings = get_settings()

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
file_repo = FileRepository()
quote_repo = QuoteRepository()
message_repo = MessageRepository()

rate_limiter = RateLimiter(
    RateLimitRepository(),
    max_submissions=settings.RATE_LIMIT_MAX,
    window=timedelta(seconds=settings.RATE_LIMIT_WINDOW_SECONDS),
)
submission_service = SubmissionService(
    order_repo,
    rate_limiter,
    code_prefix=settings.ORDER_CODE_PREFIX,
    max_code_attempts=settings.ORDER_CODE_MAX_ATTEMPTS,
)
access_service = AccessService(order_repo, file_repo, quote_repo, message_repo)
lifecycle_service = LifecycleService(order_repo, quote_repo)
message_service = MessageService(access_service, message_repo)


# -------- Public intake --------


@router.post("", response_model=SubmissionResult)
def submit_order(
    background_tasks: BackgroundTasks,
    payload: Any = Body(default=None),
    session: Session = Depends(get_session),
    notifier: OrderNotifier = Depends(get_notifier),
):
    """
    Submit an estimate request or reorder.

    Public endpoint (no account needed). Responses:
      - 200 {"success": true, "orderId", "orderCode"}
      - 400 validation failure, 429 rate limited, 500 storage failure

    The confirmation email goes out after the response; its failure is
    logged and does not affect the result.
    """
    order = submission_service.submit(session, payload)

    background_tasks.add_task(
        notifier.send_order_received,
        order_id=order.id,
        order_code=order.order_code,
        customer_email=order.customer_email,
        request_type=order.request_type,
        customer_name=order.customer_name,
    )
    return SubmissionResult(order_id=order.id, order_code=order.order_code)


# -------- Customer portal --------


@router.get("/me", response_model=list[OrderSummary])
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    skip: int = 0,
    limit: int = 50,
):
    """
    List requests submitted with the signed-in email, newest first.
    """
    return access_service.list_my_orders(session, current_user, skip, limit)


@router.get("/{order_id}", response_model=OrderDetailRead)
def get_order_detail(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Order with its files, quotes (newest first) and messages (oldest first).

    404 both for unknown orders and for orders owned by someone else.
    """
    return access_service.get_order_detail(session, current_user, order_id)


@router.patch("/{order_id}", response_model=OrderRead)
def update_order_details(
    order_id: uuid.UUID,
    payload: OrderDetailsUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Adjust quantity / needed-by date / notes before paying.
    """
    order = access_service.get_order(session, current_user, order_id)
    return lifecycle_service.update_details(session, order, payload)


@router.get("/{order_id}/files", response_model=list[OrderFileRead])
def list_order_files(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    order = access_service.get_order(session, current_user, order_id)
    return file_repo.list_for_order(session, order.id)


@router.post(
    "/{order_id}/quotes/{quote_id}/accept",
    response_model=QuoteRead,
)
def accept_quote(
    order_id: uuid.UUID,
    quote_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    payments: StubPaymentProcessor = Depends(get_payment_processor),
):
    """
    Accept & pay a pending quote.

    Moves the quote to "accepted" and the order to "Payment Received".
    """
    order = access_service.get_order(session, current_user, order_id)
    return lifecycle_service.accept_quote(session, order, quote_id, payments)


@router.get("/{order_id}/messages", response_model=list[MessageRead])
def list_messages(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return message_service.list_messages(session, current_user, order_id)


@router.post(
    "/{order_id}/messages",
    response_model=MessageRead,
    status_code=201,
)
def post_message(
    order_id: uuid.UUID,
    payload: MessageCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Add a message to the order timeline.

    Sent as "customer" by owners and as "team" by admins.
    """
    return message_service.post_message(session, current_user, order_id, payload)
