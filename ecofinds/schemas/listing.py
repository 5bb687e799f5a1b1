# ecofinds/schemas/listing.py
from datetime import datetime
from typing import Literal, get_args

from pydantic import field_validator

from ecofinds.schemas.common import CamelModel, Pagination
from ecofinds.schemas.product import ProductRead

ListingStatus = Literal["ACTIVE", "SOLD", "RESERVED", "INACTIVE"]

LISTING_STATUSES: tuple[str, ...] = get_args(ListingStatus)

# Display value for products without a listing row.
UNLISTED = "UNLISTED"


def normalize_status(value: str) -> str:
    normalized = value.strip().upper()
    if normalized not in LISTING_STATUSES:
        raise ValueError(
            f"Unknown status '{value}'. Allowed: {', '.join(LISTING_STATUSES)}"
        )
    return normalized


def _upper(v):
    return v.strip().upper() if isinstance(v, str) else v


class ListingCreate(CamelModel):
    """
    Payload for publishing a product.

    status defaults to ACTIVE.
    """

    product_id: int
    status: ListingStatus = "ACTIVE"

    @field_validator("status", mode="before")
    @classmethod
    def upper_status(cls, v):
        return _upper(v)


class ListingStatusUpdate(CamelModel):
    status: ListingStatus

    @field_validator("status", mode="before")
    @classmethod
    def upper_status(cls, v):
        return _upper(v)


class ListingRead(CamelModel):
    id: int
    product_id: int
    seller_id: int
    name: str
    price: float
    category: str
    status: str
    created_at: datetime
    updated_at: datetime


class ListingProduct(ProductRead):
    primary_image: str | None = None


class ListingWithProduct(ListingRead):
    product: ListingProduct


class ListingPage(CamelModel):
    items: list[ListingWithProduct]
    pagination: Pagination
