# ecofinds/repositories/stats_repo.py
from typing import Any

from sqlalchemy import func
from sqlmodel import Session, select

from ecofinds.models.product import Product, ProductListing


class StatsRepository:
    """
    Read-only aggregated queries over one seller's catalog.
    """

    def product_totals(self, session: Session, seller_id: int) -> tuple[int, int]:
        """(number of products, sum of quantity on hand)."""
        stmt = select(
            func.count(Product.id),
            func.coalesce(func.sum(Product.quantity), 0),
        ).where(Product.seller_id == seller_id)
        count, quantity = session.exec(stmt).one()
        return int(count or 0), int(quantity or 0)

    def price_stats(
        self,
        session: Session,
        seller_id: int,
    ) -> tuple[Any, Any, Any]:
        """(avg, min, max) price; all None when the seller has no products."""
        stmt = select(
            func.avg(Product.price),
            func.min(Product.price),
            func.max(Product.price),
        ).where(Product.seller_id == seller_id)
        return tuple(session.exec(stmt).one())

    def status_counts(self, session: Session, seller_id: int) -> list[tuple[str, int]]:
        stmt = (
            select(ProductListing.status, func.count(ProductListing.id))
            .where(ProductListing.seller_id == seller_id)
            .group_by(ProductListing.status)
        )
        return list(session.exec(stmt).all())

    def category_counts(self, session: Session, seller_id: int) -> list[tuple[str, int]]:
        stmt = (
            select(Product.category, func.count(Product.id))
            .where(Product.seller_id == seller_id)
            .group_by(Product.category)
        )
        return list(session.exec(stmt).all())
