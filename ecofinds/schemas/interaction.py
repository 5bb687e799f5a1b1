# ecofinds/schemas/interaction.py
from datetime import datetime
from typing import Literal, get_args

from pydantic import field_validator
from sqlmodel import Field

from ecofinds.schemas.common import CamelModel
from ecofinds.schemas.product import ProductSummary

InteractionKind = Literal["CART", "FAVORITE", "VIEWED", "WISHLIST"]

INTERACTION_KINDS: tuple[str, ...] = get_args(InteractionKind)


def normalize_interaction(value: str) -> str:
    normalized = value.strip().upper()
    if normalized not in INTERACTION_KINDS:
        raise ValueError(
            f"Unknown interaction '{value}'. Allowed: {', '.join(INTERACTION_KINDS)}"
        )
    return normalized


class InteractionUpsert(CamelModel):
    """
    Create-or-update payload keyed by (caller, product_id, interaction).
    """

    product_id: int
    interaction: InteractionKind
    quantity: int | None = Field(default=None, ge=1)
    notes: str | None = None

    @field_validator("interaction", mode="before")
    @classmethod
    def upper_interaction(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


class InteractionRead(CamelModel):
    id: int
    user_id: int
    product_id: int
    interaction: str
    quantity: int | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class InteractionWithProduct(InteractionRead):
    product: ProductSummary
