# ecofinds/models/purchase.py
from datetime import datetime

from sqlmodel import SQLModel, Field

from ecofinds.models.user import utcnow


class Purchase(SQLModel, table=True):
    """
    Completed (or attempted) transaction for one product.

    price_at_purchase is the unit price snapshot and does not follow
    later changes to Product.price.
    """

    __tablename__ = "purchases"

    id: int | None = Field(default=None, primary_key=True)

    user_id: int = Field(
        foreign_key="users.id",
        index=True,
    )

    product_id: int = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Units bought (>=1)",
    )

    price_at_purchase: float = Field(
        description="Unit price at time of purchase",
    )

    # PENDING | COMPLETED | CANCELLED | REFUNDED
    status: str = Field(
        default="PENDING",
        index=True,
    )

    purchase_date: datetime = Field(
        default_factory=utcnow,
        index=True,
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow},
    )
