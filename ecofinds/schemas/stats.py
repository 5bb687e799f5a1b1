# ecofinds/schemas/stats.py
from datetime import datetime

from ecofinds.schemas.common import CamelModel, Pagination
from ecofinds.schemas.product import ProductSpecs


class ListingCounters(CamelModel):
    """
    views counts VIEWED + FAVORITE rows, favorites counts FAVORITE rows.
    """

    views: int
    favorites: int


class SellerListingItem(CamelModel):
    id: int
    title: str
    price: float
    category: str
    condition: str
    quantity: int
    status: str
    primary_image: str | None = None
    created_at: datetime
    updated_at: datetime
    stats: ListingCounters


class SellerListingTotals(CamelModel):
    """
    Sparse histograms: a bucket exists only when at least one row does.
    """

    total_listings: int
    total_quantity: int
    by_status: dict[str, int]
    by_category: dict[str, int]


class SellerListingsPage(CamelModel):
    listings: list[SellerListingItem]
    pagination: Pagination
    stats: SellerListingTotals | None = None


class SellerStatsOverview(CamelModel):
    total_listings: int
    total_quantity: int
    average_price: float
    min_price: float
    max_price: float


class SellerStats(CamelModel):
    """
    Full payload for the seller dashboard.
    """

    overview: SellerStatsOverview
    status_distribution: dict[str, int]
    category_distribution: dict[str, int]
    interactions: dict[str, int]


class RecentViewer(CamelModel):
    user_id: int
    display_name: str
    image_url: str | None = None


class ListingDetailImage(CamelModel):
    id: int
    url: str
    is_primary: bool


class ListingDetailStats(ListingCounters):
    recent_viewers: list[RecentViewer]


class ListingDates(CamelModel):
    created: datetime
    updated: datetime
    listed: datetime | None = None


class SellerListingDetail(CamelModel):
    id: int
    title: str
    description: str
    price: float
    category: str
    condition: str
    quantity: int
    status: str
    images: list[ListingDetailImage]
    specs: ProductSpecs
    stats: ListingDetailStats
    dates: ListingDates
