# ecofinds/schemas/purchase.py
from datetime import datetime
from typing import Literal

from ecofinds.schemas.common import CamelModel, Pagination
from ecofinds.schemas.product import ProductSpecs
from ecofinds.schemas.user import AddressRead

PurchaseStatus = Literal["PENDING", "COMPLETED", "CANCELLED", "REFUNDED"]


class PurchaseProductBrief(CamelModel):
    id: int
    name: str
    category: str
    primary_image: str | None = None


class PurchaseSeller(CamelModel):
    id: int
    name: str
    email: str
    image: str | None = None
    phone: str | None = None


class PurchaseHistoryItem(CamelModel):
    id: int
    product: PurchaseProductBrief
    seller: PurchaseSeller
    quantity: int
    price_at_purchase: float
    total_amount: float
    status: str
    purchase_date: datetime
    updated_at: datetime


class PurchaseSummary(CamelModel):
    """
    Lifetime totals over COMPLETED purchases. Not scoped by the
    history filters of the same request.
    """

    total_purchases: int
    total_items: int
    total_spent: float


class PurchaseHistoryPage(CamelModel):
    purchases: list[PurchaseHistoryItem]
    pagination: Pagination
    summary: PurchaseSummary


class PurchaseImage(CamelModel):
    url: str
    is_primary: bool


class PurchaseDetailProduct(CamelModel):
    id: int
    name: str
    description: str
    category: str
    condition: str
    images: list[PurchaseImage]
    specifications: ProductSpecs


class PurchaseDetailSeller(PurchaseSeller):
    address: AddressRead | None = None


class PurchaseFacts(CamelModel):
    quantity: int
    price_at_purchase: float
    total_amount: float
    status: str
    purchase_date: datetime
    updated_at: datetime


class PurchaseDetail(CamelModel):
    id: int
    product: PurchaseDetailProduct
    seller: PurchaseDetailSeller
    purchase: PurchaseFacts
