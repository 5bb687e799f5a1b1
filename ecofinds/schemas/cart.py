# ecofinds/schemas/cart.py
from datetime import datetime

from sqlmodel import Field

from ecofinds.schemas.common import CamelModel
from ecofinds.schemas.user import SellerSummary


class CartItemCreate(CamelModel):
    """
    Payload for adding to cart.

    Adding a product that is already in the cart replaces its quantity.
    """

    product_id: int
    quantity: int = Field(default=1, ge=1)


class CartItemUpdate(CamelModel):
    """
    Payload for updating quantity of a cart item.
    """

    quantity: int = Field(ge=1)


class CartProduct(CamelModel):
    id: int
    title: str
    category: str
    price: float
    quantity: int
    condition: str
    primary_image: str | None = None
    seller: SellerSummary


class CartItemRead(CamelModel):
    """
    Single cart row returned by add/update.
    """

    id: int
    user_id: int
    product_id: int
    interaction: str
    quantity: int
    product: CartProduct
    created_at: datetime
    updated_at: datetime


class CartLineProduct(CamelModel):
    id: int
    name: str
    category: str
    image_url: str | None = None
    price: float
    stock: int
    status: str


class CartLineSeller(CamelModel):
    id: int
    name: str
    email: str
    image: str | None = None
    phone: str | None = None


class CartLine(CamelModel):
    id: int
    product: CartLineProduct
    seller: CartLineSeller
    quantity: int
    total_price: float
    item_total: float
    added_at: datetime
    updated_at: datetime


class CategoryBreakdown(CamelModel):
    category: str
    item_count: int
    subtotal: float


class CartDetails(CamelModel):
    total_items: int
    unique_items: int
    subtotal: float
    items_by_category: list[CategoryBreakdown]


class CartSummary(CamelModel):
    """
    Full cart response: per-line totals plus aggregated details.
    """

    cart_details: CartDetails
    items: list[CartLine]
