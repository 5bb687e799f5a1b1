# ecofinds/models/product.py
from datetime import datetime

from sqlmodel import SQLModel, Field

from ecofinds.models.user import utcnow


class Product(SQLModel, table=True):
    """
    A second-hand item offered by exactly one seller.

    category / condition are plain strings; allowed values are enforced
    by the request schemas (ecofinds.schemas.product).
    """

    __tablename__ = "products"

    id: int | None = Field(default=None, primary_key=True)

    title: str = Field(
        max_length=255,
        index=True,
        description="Display name of the item",
    )

    # CLOTHING | ELECTRONICS | FURNITURE | BOOKS | SPORTS | OTHER
    category: str = Field(
        index=True,
        max_length=30,
    )

    description: str

    price: float = Field(
        ge=0,
        description="Asking price (2 decimals)",
    )

    quantity: int = Field(
        default=1,
        ge=0,
        description="Units on hand",
    )

    condition: str = Field(
        max_length=50,
        description="Free text, e.g. New / Used / Like new",
    )

    # --- optional physical specs ---
    year_of_manufacture: int | None = None
    brand: str | None = None
    model: str | None = None
    length: float | None = None
    width: float | None = None
    height: float | None = None
    weight: float | None = None
    material: str | None = None
    color: str | None = None
    has_original_packaging: bool = Field(default=False)
    has_manual: bool = Field(default=False)
    working_condition: str

    seller_id: int = Field(
        foreign_key="users.id",
        index=True,
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        index=True,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow},
    )


class ProductImage(SQLModel, table=True):
    """
    Image attached to a product.

    At most one image per product carries is_primary; the upload service
    clears the flag on siblings when a new primary arrives.
    """

    __tablename__ = "product_images"

    id: int | None = Field(default=None, primary_key=True)

    product_id: int = Field(
        foreign_key="products.id",
        index=True,
        description="FK to products.id",
    )

    url: str = Field(
        description="Public URL stored in object storage",
    )

    is_primary: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utcnow)


class ProductListing(SQLModel, table=True):
    """
    Publication record of a product (1:1).

    name / price / category are denormalized copies of the product.
    """

    __tablename__ = "product_listings"

    id: int | None = Field(default=None, primary_key=True)

    product_id: int = Field(
        foreign_key="products.id",
        unique=True,
        index=True,
    )

    seller_id: int = Field(
        foreign_key="users.id",
        index=True,
    )

    name: str
    price: float = Field(index=True)
    category: str = Field(index=True)

    # ACTIVE | SOLD | RESERVED | INACTIVE
    status: str = Field(
        default="ACTIVE",
        index=True,
    )

    created_at: datetime = Field(default_factory=utcnow, index=True)

    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow},
    )
