# ecofinds/repositories/listing_repo.py
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ecofinds.models.product import ProductListing


class ListingRepository:
    """
    Data access layer for ProductListing.

    Filters passed to search()/count() are AND-ed; a None filter is
    not applied.
    """

    @staticmethod
    def _filters(
        category: str | None = None,
        status: str | None = None,
        seller_id: int | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[Any]:
        conditions: list[Any] = []
        if category is not None:
            conditions.append(ProductListing.category == category)
        if status is not None:
            conditions.append(ProductListing.status == status)
        if seller_id is not None:
            conditions.append(ProductListing.seller_id == seller_id)
        if min_price is not None:
            conditions.append(ProductListing.price >= min_price)
        if max_price is not None:
            conditions.append(ProductListing.price <= max_price)
        return conditions

    def get_by_id(self, session: Session, listing_id: int) -> ProductListing | None:
        return session.get(ProductListing, listing_id)

    def get_for_product(
        self,
        session: Session,
        product_id: int,
    ) -> ProductListing | None:
        stmt = select(ProductListing).where(ProductListing.product_id == product_id)
        return session.exec(stmt).first()

    def for_products(
        self,
        session: Session,
        product_ids: list[int],
    ) -> dict[int, ProductListing]:
        if not product_ids:
            return {}
        stmt = select(ProductListing).where(ProductListing.product_id.in_(product_ids))
        return {row.product_id: row for row in session.exec(stmt).all()}

    def search(
        self,
        session: Session,
        *,
        order_by: list[Any],
        skip: int = 0,
        limit: int = 10,
        **filters: Any,
    ) -> list[ProductListing]:
        stmt = (
            select(ProductListing)
            .where(*self._filters(**filters))
            .order_by(*order_by)
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def count(self, session: Session, **filters: Any) -> int:
        stmt = (
            select(func.count())
            .select_from(ProductListing)
            .where(*self._filters(**filters))
        )
        return int(session.exec(stmt).one() or 0)

    def create(self, session: Session, listing: ProductListing) -> ProductListing:
        """
        Insert a listing. The unique product_id constraint rejects a second
        listing for the same product with IntegrityError (session rolled back).
        """
        session.add(listing)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            raise
        session.refresh(listing)
        return listing

    def update(self, session: Session, listing: ProductListing) -> ProductListing:
        session.add(listing)
        session.commit()
        session.refresh(listing)
        return listing

    def delete(self, session: Session, listing: ProductListing) -> None:
        session.delete(listing)
        session.commit()
