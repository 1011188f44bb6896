# orderdesk/routers/admin.py
import uuid

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlmodel import Session

from orderdesk.core.auth import require_admin
from orderdesk.database import get_session
from orderdesk.models.user import User
from orderdesk.repositories.file_repo import FileRepository
from orderdesk.repositories.message_repo import MessageRepository
from orderdesk.repositories.order_repo import OrderRepository
from orderdesk.repositories.quote_repo import QuoteRepository
from orderdesk.repositories.stats_repo import StatsRepository
from orderdesk.schemas.order import OrderDetailRead, OrderRead, OrderStatus, OrderStatusUpdate
from orderdesk.schemas.quote import QuoteCreate, QuoteRead
from orderdesk.schemas.stats import AdminDashboardStats
from orderdesk.services.access_service import AccessService
from orderdesk.services.lifecycle_service import LifecycleService
from orderdesk.services.notification_service import OrderNotifier, get_notifier
from orderdesk.services.stats_service import StatsService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)

order_repo = OrderRepository()
file_repo = FileRepository()
quote_repo = QuoteRepository()

access_service = AccessService(order_repo, file_repo, quote_repo, MessageRepository())
lifecycle_service = LifecycleService(order_repo, quote_repo)
stats_service = StatsService(StatsRepository())


@router.get("/orders", response_model=list[OrderRead])
def list_all_orders(
    session: Session = Depends(get_session),
    status: OrderStatus | None = None,
    skip: int = 0,
    limit: int = 50,
):
    """
    List all orders, newest first, optionally filtered by status.
    """
    return access_service.list_all_orders(session, status=status, skip=skip, limit=limit)


@router.get("/orders/{order_id}", response_model=OrderDetailRead)
def get_order_admin(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_admin),
):
    return access_service.get_order_detail(session, current_user, order_id)


@router.patch("/orders/{order_id}/status", response_model=OrderRead)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Set any lifecycle status directly.

    No transition rules apply and quotes are left untouched; use the
    quote endpoints for "Estimate Sent" / "Payment Received" side effects.
    """
    return lifecycle_service.set_status(session, order_id, payload)


@router.post(
    "/orders/{order_id}/quotes",
    response_model=QuoteRead,
    status_code=status.HTTP_201_CREATED,
)
def issue_quote(
    order_id: uuid.UUID,
    payload: QuoteCreate,
    session: Session = Depends(get_session),
):
    """
    Issue a quote. The order moves to "Estimate Sent" whatever its status,
    and any pending quote on it is superseded.
    """
    return lifecycle_service.issue_quote(session, order_id, payload)


@router.post(
    "/orders/{order_id}/notify",
    status_code=status.HTTP_202_ACCEPTED,
)
def resend_confirmation(
    order_id: uuid.UUID,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_admin),
    notifier: OrderNotifier = Depends(get_notifier),
):
    """
    Re-send the "request received" email, listing the attached files.
    """
    order = access_service.get_order(session, current_user, order_id)
    filenames = [f.filename for f in file_repo.list_for_order(session, order.id)]

    background_tasks.add_task(
        notifier.send_order_received,
        order_id=order.id,
        order_code=order.order_code,
        customer_email=order.customer_email,
        request_type=order.request_type,
        customer_name=order.customer_name,
        filenames=filenames,
    )
    return {"success": True}


@router.get("/stats", response_model=AdminDashboardStats)
def get_admin_dashboard_stats(
    session: Session = Depends(get_session),
):
    """
    Order counts per status, open quotes and the latest orders.
    """
    return stats_service.get_admin_dashboard_stats(session)
