# ecofinds/repositories/purchase_repo.py
from datetime import datetime
from typing import Any

from sqlalchemy import func
from sqlmodel import Session, select

from ecofinds.models.purchase import Purchase


class PurchaseRepository:
    """
    Data access layer for purchases (read side; rows are written by checkout).
    """

    @staticmethod
    def _filters(
        user_id: int,
        status: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[Any]:
        conditions: list[Any] = [Purchase.user_id == user_id]
        if status is not None:
            conditions.append(Purchase.status == status)
        if start_date is not None:
            conditions.append(Purchase.purchase_date >= start_date)
        if end_date is not None:
            conditions.append(Purchase.purchase_date <= end_date)
        return conditions

    def list_for_user(
        self,
        session: Session,
        user_id: int,
        *,
        order_by: list[Any],
        skip: int = 0,
        limit: int = 10,
        **filters: Any,
    ) -> list[Purchase]:
        stmt = (
            select(Purchase)
            .where(*self._filters(user_id, **filters))
            .order_by(*order_by)
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def count_for_user(self, session: Session, user_id: int, **filters: Any) -> int:
        stmt = (
            select(func.count())
            .select_from(Purchase)
            .where(*self._filters(user_id, **filters))
        )
        return int(session.exec(stmt).one() or 0)

    def get_for_user(
        self,
        session: Session,
        purchase_id: int,
        user_id: int,
    ) -> Purchase | None:
        stmt = select(Purchase).where(
            Purchase.id == purchase_id,
            Purchase.user_id == user_id,
        )
        return session.exec(stmt).first()

    def completed_totals(self, session: Session, user_id: int) -> tuple[int, int, float]:
        """
        Lifetime (count, units, amount spent) over COMPLETED purchases.
        """
        stmt = select(
            func.count(Purchase.id),
            func.coalesce(func.sum(Purchase.quantity), 0),
            func.coalesce(func.sum(Purchase.quantity * Purchase.price_at_purchase), 0.0),
        ).where(Purchase.user_id == user_id, Purchase.status == "COMPLETED")
        count, units, spent = session.exec(stmt).one()
        return int(count or 0), int(units or 0), float(spent or 0.0)
