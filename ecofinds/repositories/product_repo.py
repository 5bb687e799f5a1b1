# ecofinds/repositories/product_repo.py
from collections import defaultdict
from typing import Any

from sqlalchemy import delete, func
from sqlmodel import Session, select

from ecofinds.models.interaction import UserProduct
from ecofinds.models.product import Product, ProductImage, ProductListing
from ecofinds.models.purchase import Purchase

# Newest first; id breaks ties between rows created in the same instant.
NEWEST_FIRST = (Product.created_at.desc(), Product.id.desc())


class ProductRepository:
    """
    Data access layer for Product & ProductImage.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: int) -> Product | None:
        return session.get(Product, product_id)

    def get_many(self, session: Session, product_ids: list[int]) -> dict[int, Product]:
        if not product_ids:
            return {}
        stmt = select(Product).where(Product.id.in_(product_ids))
        return {p.id: p for p in session.exec(stmt).all()}

    def list_page(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 20,
        category: str | None = None,
    ) -> list[Product]:
        stmt = select(Product)
        if category is not None:
            stmt = stmt.where(Product.category == category)
        stmt = stmt.order_by(*NEWEST_FIRST).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def count(self, session: Session, category: str | None = None) -> int:
        stmt = select(func.count()).select_from(Product)
        if category is not None:
            stmt = stmt.where(Product.category == category)
        return int(session.exec(stmt).one() or 0)

    def list_all(self, session: Session) -> list[Product]:
        """Every product, newest first (used for the grouped catalog)."""
        stmt = select(Product).order_by(*NEWEST_FIRST)
        return list(session.exec(stmt).all())

    def list_related(
        self,
        session: Session,
        category: str,
        exclude_id: int,
        limit: int,
    ) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.category == category, Product.id != exclude_id)
            .order_by(*NEWEST_FIRST)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def list_by_seller(
        self,
        session: Session,
        seller_id: int,
        exclude_id: int,
        limit: int,
    ) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.seller_id == seller_id, Product.id != exclude_id)
            .order_by(*NEWEST_FIRST)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def _seller_query(self, stmt, seller_id: int, status: str | None, category: str | None):
        stmt = stmt.where(Product.seller_id == seller_id)
        if status is not None:
            # Products without a listing never match a status filter.
            stmt = stmt.join(
                ProductListing, ProductListing.product_id == Product.id
            ).where(ProductListing.status == status)
        if category is not None:
            stmt = stmt.where(Product.category == category)
        return stmt

    def list_for_seller(
        self,
        session: Session,
        seller_id: int,
        *,
        order_by: list[Any],
        skip: int = 0,
        limit: int = 10,
        status: str | None = None,
        category: str | None = None,
    ) -> list[Product]:
        stmt = self._seller_query(select(Product), seller_id, status, category)
        stmt = stmt.order_by(*order_by).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def count_for_seller(
        self,
        session: Session,
        seller_id: int,
        status: str | None = None,
        category: str | None = None,
    ) -> int:
        stmt = self._seller_query(
            select(func.count(Product.id)), seller_id, status, category
        )
        return int(session.exec(stmt).one() or 0)

    def get_for_seller(
        self,
        session: Session,
        product_id: int,
        seller_id: int,
    ) -> Product | None:
        stmt = select(Product).where(
            Product.id == product_id,
            Product.seller_id == seller_id,
        )
        return session.exec(stmt).first()

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete_with_dependents(self, session: Session, product: Product) -> list[str]:
        """
        Delete a product together with its images, listing and interaction
        rows in a single transaction.

        Returns the URLs of the removed images so stored files can be
        cleaned up after the commit.
        """
        urls = [img.url for img in self.list_images_for_product(session, product.id)]
        session.exec(delete(ProductImage).where(ProductImage.product_id == product.id))
        session.exec(delete(ProductListing).where(ProductListing.product_id == product.id))
        session.exec(delete(UserProduct).where(UserProduct.product_id == product.id))
        session.delete(product)
        session.commit()
        return urls

    def has_purchases(self, session: Session, product_id: int) -> bool:
        stmt = select(Purchase.id).where(Purchase.product_id == product_id).limit(1)
        return session.exec(stmt).first() is not None

    # ----- Favorites -----

    def favorite_counts(
        self,
        session: Session,
        product_ids: list[int],
    ) -> dict[int, int]:
        """
        Number of FAVORITE rows per product. Products without favorites
        are absent from the result.
        """
        if not product_ids:
            return {}
        stmt = (
            select(UserProduct.product_id, func.count(UserProduct.id))
            .where(
                UserProduct.product_id.in_(product_ids),
                UserProduct.interaction == "FAVORITE",
            )
            .group_by(UserProduct.product_id)
        )
        return {pid: int(n) for pid, n in session.exec(stmt).all()}

    # ----- Product images -----

    def list_images_for_product(
        self,
        session: Session,
        product_id: int,
    ) -> list[ProductImage]:
        stmt = (
            select(ProductImage)
            .where(ProductImage.product_id == product_id)
            .order_by(ProductImage.id)
        )
        return list(session.exec(stmt).all())

    def images_for_products(
        self,
        session: Session,
        product_ids: list[int],
    ) -> dict[int, list[ProductImage]]:
        """
        Images grouped by product, each list in upload order.
        """
        grouped: dict[int, list[ProductImage]] = defaultdict(list)
        if not product_ids:
            return grouped
        stmt = (
            select(ProductImage)
            .where(ProductImage.product_id.in_(product_ids))
            .order_by(ProductImage.id)
        )
        for image in session.exec(stmt).all():
            grouped[image.product_id].append(image)
        return grouped

    def get_image_by_id(
        self,
        session: Session,
        image_id: int,
    ) -> ProductImage | None:
        return session.get(ProductImage, image_id)

    def create_images(
        self,
        session: Session,
        images: list[ProductImage],
        clear_primary_for: int | None = None,
    ) -> list[ProductImage]:
        """
        Insert images in one transaction.

        If clear_primary_for is given, existing images of that product
        lose their primary flag first.
        """
        if clear_primary_for is not None:
            for existing in self.list_images_for_product(session, clear_primary_for):
                if existing.is_primary:
                    existing.is_primary = False
                    session.add(existing)
        session.add_all(images)
        session.commit()
        for image in images:
            session.refresh(image)
        return images

    def delete_image(
        self,
        session: Session,
        image: ProductImage,
    ) -> None:
        session.delete(image)
        session.commit()
