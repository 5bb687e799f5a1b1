# ecofinds/schemas/product.py
from datetime import datetime
from typing import Literal, get_args

from pydantic import field_validator
from sqlmodel import Field

from ecofinds.schemas.common import CamelModel, Pagination
from ecofinds.schemas.user import SellerAddress, SellerDetail, SellerSummary

ProductCategory = Literal[
    "CLOTHING",
    "ELECTRONICS",
    "FURNITURE",
    "BOOKS",
    "SPORTS",
    "OTHER",
]

# Enumeration order is the bucket order of the grouped catalog.
PRODUCT_CATEGORIES: tuple[str, ...] = get_args(ProductCategory)

_OPTIONAL_NUMBERS = ("year_of_manufacture", "length", "width", "height", "weight")
_OPTIONAL_TEXT = ("brand", "model", "material", "color")
_REQUIRED_COLUMNS = (
    "title",
    "category",
    "description",
    "price",
    "quantity",
    "condition",
    "working_condition",
    "has_original_packaging",
    "has_manual",
)


def normalize_category(value: str) -> str:
    """
    Case-normalize a category name ("Electronics" -> "ELECTRONICS").

    Raises:
        ValueError: if the value is not a known category.
    """
    normalized = value.strip().upper()
    if normalized not in PRODUCT_CATEGORIES:
        raise ValueError(
            f"Unknown category '{value}'. Allowed: {', '.join(PRODUCT_CATEGORIES)}"
        )
    return normalized


def _upper(v):
    return v.strip().upper() if isinstance(v, str) else v


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class ProductCreate(CamelModel):
    """
    Payload for creating a product.

    Required: title, category, description, price, quantity, condition,
    working_condition. Every physical-spec field is optional and may be
    sent as an empty string (treated as null). Numbers may arrive as
    strings from form inputs and are parsed.
    """

    title: str = Field(max_length=255)
    category: ProductCategory
    description: str
    price: float = Field(gt=0)
    quantity: int = Field(gt=0)
    condition: str = Field(max_length=50)
    working_condition: str

    year_of_manufacture: int | None = None
    brand: str | None = None
    model: str | None = None
    length: float | None = None
    width: float | None = None
    height: float | None = None
    weight: float | None = None
    material: str | None = None
    color: str | None = None
    has_original_packaging: bool = False
    has_manual: bool = False

    @field_validator("category", mode="before")
    @classmethod
    def upper_category(cls, v):
        return _upper(v)

    @field_validator("title", "description", "condition", "working_condition")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator(*_OPTIONAL_NUMBERS, *_OPTIONAL_TEXT, mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("price")
    @classmethod
    def two_decimals(cls, v: float) -> float:
        return round(v, 2)


class ProductUpdate(CamelModel):
    """
    Partial update payload for products.
    Only fields present in the request body are written.
    """

    title: str | None = Field(default=None, max_length=255)
    category: ProductCategory | None = None
    description: str | None = None
    price: float | None = Field(default=None, gt=0)
    quantity: int | None = Field(default=None, ge=0)
    condition: str | None = Field(default=None, max_length=50)
    working_condition: str | None = None

    year_of_manufacture: int | None = None
    brand: str | None = None
    model: str | None = None
    length: float | None = None
    width: float | None = None
    height: float | None = None
    weight: float | None = None
    material: str | None = None
    color: str | None = None
    has_original_packaging: bool | None = None
    has_manual: bool | None = None

    # Omitted means "keep"; an explicit null for these columns is rejected.
    @field_validator(*_REQUIRED_COLUMNS, mode="before")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def upper_category(cls, v):
        return _upper(v)

    @field_validator("title", "description", "condition", "working_condition")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator(*_OPTIONAL_NUMBERS, *_OPTIONAL_TEXT, mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("price")
    @classmethod
    def two_decimals(cls, v: float | None) -> float | None:
        return round(v, 2) if v is not None else v


class ProductImageRead(CamelModel):
    id: int
    url: str
    is_primary: bool


class ProductDimensions(CamelModel):
    length: float | None = None
    width: float | None = None
    height: float | None = None
    weight: float | None = None


class ProductSpecs(CamelModel):
    """Physical specification block shared by detail views."""

    year_of_manufacture: int | None = None
    brand: str | None = None
    model: str | None = None
    dimensions: ProductDimensions
    material: str | None = None
    color: str | None = None
    has_original_packaging: bool
    has_manual: bool
    working_condition: str


class ProductFields(CamelModel):
    """
    Flat product columns as exposed to clients.
    """

    id: int
    title: str
    category: str
    description: str
    price: float
    quantity: int
    condition: str
    year_of_manufacture: int | None = None
    brand: str | None = None
    model: str | None = None
    length: float | None = None
    width: float | None = None
    height: float | None = None
    weight: float | None = None
    material: str | None = None
    color: str | None = None
    has_original_packaging: bool
    has_manual: bool
    working_condition: str
    seller_id: int
    created_at: datetime
    updated_at: datetime


class ProductRead(ProductFields):
    """Product with its full image list and seller summary."""

    images: list[ProductImageRead]
    seller: SellerSummary


class ProductSummary(ProductFields):
    """
    List-view shape: one representative image and a favorite counter
    instead of the raw image list.
    """

    seller: SellerSummary
    primary_image: str | None = None
    favorite_count: int = 0


class ProductListingBrief(CamelModel):
    id: int
    status: str
    created_at: datetime
    updated_at: datetime


class ViewerInteraction(CamelModel):
    id: int
    interaction: str
    quantity: int | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class ProductDetail(ProductFields):
    images: list[ProductImageRead]
    seller: SellerDetail
    listing: ProductListingBrief | None = None
    primary_image: str | None = None
    favorite_count: int = 0
    user_interactions: list[ViewerInteraction] = []
    seller_location: SellerAddress


class ProductDetailPayload(CamelModel):
    product: ProductDetail
    related_products: list[ProductSummary]
    seller_other_products: list[ProductSummary]


class ProductPage(CamelModel):
    products: list[ProductRead]
    pagination: Pagination


class ProductSummaryPage(CamelModel):
    products: list[ProductSummary]
    pagination: Pagination


class CategoryBucket(CamelModel):
    category: str
    products: list[ProductSummary]
