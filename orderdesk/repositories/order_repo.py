# orderdesk/repositories/order_repo.py
import uuid

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from orderdesk.core.errors import OrderCodeCollision
from orderdesk.models.order import Order, utcnow


class OrderRepository:
    """
    Data access layer for orders.

    NOTE:
      - `create` and `update` commit.
      - `stage` only flushes; quote acceptance changes a quote and its order
        together and the service commits once.
    """

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def get_by_code(self, session: Session, order_code: str) -> Order | None:
        stmt = select(Order).where(Order.order_code == order_code)
        return session.exec(stmt).first()

    def list_for_email(
        self,
        session: Session,
        email: str,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.customer_email == email)
            .order_by(Order.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return session.exec(stmt).all()

    def list_all(
        self,
        session: Session,
        status: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = select(Order)
        if status is not None:
            stmt = stmt.where(Order.status == status)
        stmt = stmt.order_by(Order.created_at.desc()).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def create(self, session: Session, order: Order) -> Order:
        """
        Insert an Order together with its order_code.

        Raises:
            OrderCodeCollision: the code is already taken (unique constraint).
            IntegrityError: any other constraint violation.
        """
        session.add(order)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            if self.get_by_code(session, order.order_code) is not None:
                raise OrderCodeCollision(order.order_code)
            raise
        session.refresh(order)
        return order

    def stage(self, session: Session, order: Order) -> Order:
        order.updated_at = utcnow()
        session.add(order)
        session.flush()
        return order

    def update(self, session: Session, order: Order) -> Order:
        order.updated_at = utcnow()
        session.add(order)
        session.commit()
        session.refresh(order)
        return order
