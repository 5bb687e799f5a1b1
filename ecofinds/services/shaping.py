# ecofinds/services/shaping.py
"""
Helpers that turn rows into the denormalized views returned by the API.

Used by every service that surfaces products, so the representative
image, pagination block and seller summary are computed the same way
everywhere.
"""
import math
from typing import Any, Iterable

from pydantic.alias_generators import to_snake
from sqlmodel import Session, SQLModel

from ecofinds.core.errors import ValidationError
from ecofinds.models.product import Product, ProductImage
from ecofinds.models.user import User, UserImage
from ecofinds.repositories.product_repo import ProductRepository
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.common import Pagination
from ecofinds.schemas.product import (
    ProductDimensions,
    ProductImageRead,
    ProductRead,
    ProductSpecs,
    ProductSummary,
)
from ecofinds.schemas.user import SellerSummary

SORT_ORDERS = ("asc", "desc")


def primary_image_url(images: Iterable[ProductImage] | None) -> str | None:
    """
    Representative image of a product.

    Rule:
      1. the first image flagged is_primary
      2. else the first image in the given order
      3. else None
    """
    first = None
    for image in images or ():
        if image.is_primary:
            return image.url
        if first is None:
            first = image
    return first.url if first is not None else None


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def build_pagination(
    page: int,
    limit: int,
    skip: int,
    returned: int,
    total: int,
) -> Pagination:
    return Pagination(
        current_page=page,
        total_pages=math.ceil(total / limit) if limit else 0,
        total_items=total,
        has_more=skip + returned < total,
    )


def resolve_sort(
    model: type[SQLModel],
    sort_by: str | None,
    sort_order: str | None,
    default: str,
) -> list[Any]:
    """
    Build ORDER BY clauses from client-supplied sortBy/sortOrder.

    sort_by may be camelCase (createdAt) or snake_case (created_at) and
    must name a column of `model`. The primary key is appended as a
    tie-break in the same direction.

    Raises:
        ValidationError(400): unknown field or order.
    """
    field = to_snake(sort_by) if sort_by else default
    if field not in model.model_fields:
        raise ValidationError(f"Invalid sort field '{sort_by}'")

    order = (sort_order or "desc").lower()
    if order not in SORT_ORDERS:
        raise ValidationError("sortOrder must be 'asc' or 'desc'")

    column = getattr(model, field)
    if order == "asc":
        return [column.asc(), model.id.asc()]
    return [column.desc(), model.id.desc()]


def seller_summary(user: User, image: UserImage | None = None) -> SellerSummary:
    return SellerSummary(
        id=user.id,
        display_name=user.display_name,
        email=user.email,
        image_url=image.url if image is not None else None,
    )


def image_reads(images: Iterable[ProductImage]) -> list[ProductImageRead]:
    return [
        ProductImageRead(id=img.id, url=img.url, is_primary=img.is_primary)
        for img in images
    ]


def product_specs(product: Product) -> ProductSpecs:
    return ProductSpecs(
        year_of_manufacture=product.year_of_manufacture,
        brand=product.brand,
        model=product.model,
        dimensions=ProductDimensions(
            length=product.length,
            width=product.width,
            height=product.height,
            weight=product.weight,
        ),
        material=product.material,
        color=product.color,
        has_original_packaging=product.has_original_packaging,
        has_manual=product.has_manual,
        working_condition=product.working_condition,
    )


class CatalogShaper:
    """
    Batch shaping of product pages.

    For N products the images, sellers (with their images) and favorite
    counts are loaded with one query each, never one per product.
    """

    def __init__(self, products: ProductRepository, users: UserRepository):
        self.products = products
        self.users = users

    def sellers(self, session: Session, seller_ids: set[int]) -> dict[int, SellerSummary]:
        users = self.users.get_many(session, seller_ids)
        images = self.users.images_for_users(session, seller_ids)
        return {
            uid: seller_summary(user, images.get(uid))
            for uid, user in users.items()
        }

    def reads(self, session: Session, products: list[Product]) -> list[ProductRead]:
        """Product fields + full image list + seller summary."""
        ids = [p.id for p in products]
        images = self.products.images_for_products(session, ids)
        sellers = self.sellers(session, {p.seller_id for p in products})
        return [
            ProductRead(
                **p.model_dump(),
                images=image_reads(images.get(p.id, [])),
                seller=sellers[p.seller_id],
            )
            for p in products
        ]

    def read(self, session: Session, product: Product) -> ProductRead:
        return self.reads(session, [product])[0]

    def summaries(
        self,
        session: Session,
        products: list[Product],
    ) -> list[ProductSummary]:
        """
        List-view shape: the raw image list is replaced by primary_image
        and a favorite_count is attached.
        """
        ids = [p.id for p in products]
        images = self.products.images_for_products(session, ids)
        favorites = self.products.favorite_counts(session, ids)
        sellers = self.sellers(session, {p.seller_id for p in products})
        return [
            ProductSummary(
                **p.model_dump(),
                seller=sellers[p.seller_id],
                primary_image=primary_image_url(images.get(p.id)),
                favorite_count=favorites.get(p.id, 0),
            )
            for p in products
        ]
