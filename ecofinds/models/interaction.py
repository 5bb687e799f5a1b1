# ecofinds/models/interaction.py
from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field

from ecofinds.models.user import utcnow


class UserProduct(SQLModel, table=True):
    """
    Typed edge between a user and a product.

    interaction: CART | FAVORITE | VIEWED | WISHLIST

    One user cannot have 2 rows for the same (product, interaction);
    the composite unique constraint is what enforces it, so repeated
    "add to cart" is an update of quantity, never a second row.
    """

    __tablename__ = "user_products"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "product_id",
            "interaction",
            name="uq_user_product_interaction",
        ),
    )

    id: int | None = Field(default=None, primary_key=True)

    user_id: int = Field(
        foreign_key="users.id",
        index=True,
    )

    product_id: int = Field(
        foreign_key="products.id",
        index=True,
    )

    interaction: str = Field(
        index=True,
        max_length=20,
    )

    quantity: int | None = Field(
        default=None,
        description="Only meaningful for CART rows",
    )

    notes: str | None = None

    created_at: datetime = Field(default_factory=utcnow)

    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow},
    )
