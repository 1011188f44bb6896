# orderdesk/services/stats_service.py
from sqlmodel import Session

from orderdesk.repositories.stats_repo import StatsRepository
from orderdesk.schemas.order import ORDER_STATUSES
from orderdesk.schemas.stats import (
    AdminDashboardStats,
    LatestOrderSummary,
    StatusCount,
)


class StatsService:
    """
    Orchestrates aggregated admin dashboard statistics.
    """

    def __init__(self, repo: StatsRepository):
        self.repo = repo

    def get_admin_dashboard_stats(
        self,
        session: Session,
        latest_n_orders: int = 5,
    ) -> AdminDashboardStats:
        counts = dict(self.repo.orders_by_status(session))

        # Every status appears, in lifecycle order, even when empty
        by_status = [
            StatusCount(status=status, order_count=counts.get(status, 0))
            for status in ORDER_STATUSES
        ]

        latest_orders = [
            LatestOrderSummary(
                id=order.id,
                order_code=order.order_code,
                created_at=order.created_at,
                request_type=order.request_type,
                customer_email=order.customer_email,
                status=order.status,
            )
            for order in self.repo.latest_orders(session, limit=latest_n_orders)
        ]

        return AdminDashboardStats(
            total_orders=self.repo.count_orders(session),
            open_quotes=self.repo.count_pending_quotes(session),
            by_status=by_status,
            latest_orders=latest_orders,
        )
