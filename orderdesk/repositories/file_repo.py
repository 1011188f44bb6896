# orderdesk/repositories/file_repo.py
import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from orderdesk.models.order import OrderFile


class FileRepository:
    """
    Data access layer for order_files (attachment metadata).

    Blob bytes live in Storage; this table only records what was uploaded.
    """

    def count_for_order(self, session: Session, order_id: uuid.UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(OrderFile)
            .where(OrderFile.order_id == order_id)
        )
        return int(session.exec(stmt).one() or 0)

    def list_for_order(self, session: Session, order_id: uuid.UUID) -> list[OrderFile]:
        stmt = (
            select(OrderFile)
            .where(OrderFile.order_id == order_id)
            .order_by(OrderFile.created_at)
        )
        return session.exec(stmt).all()

    def get_by_storage_path(self, session: Session, storage_path: str) -> OrderFile | None:
        stmt = select(OrderFile).where(OrderFile.storage_path == storage_path)
        return session.exec(stmt).first()

    def create(self, session: Session, order_file: OrderFile) -> OrderFile:
        """Insert metadata for an uploaded blob; rolls back on failure."""
        session.add(order_file)
        try:
            session.commit()
        except Exception:
            session.rollback()
            raise
        session.refresh(order_file)
        return order_file
