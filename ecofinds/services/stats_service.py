# ecofinds/services/stats_service.py
from sqlmodel import Session

from ecofinds.core.errors import NotFoundError, ValidationError
from ecofinds.models.product import Product
from ecofinds.models.user import User
from ecofinds.repositories.interaction_repo import InteractionRepository
from ecofinds.repositories.listing_repo import ListingRepository
from ecofinds.repositories.product_repo import ProductRepository
from ecofinds.repositories.stats_repo import StatsRepository
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.listing import UNLISTED, normalize_status
from ecofinds.schemas.product import normalize_category
from ecofinds.schemas.stats import (
    ListingCounters,
    ListingDates,
    ListingDetailImage,
    ListingDetailStats,
    RecentViewer,
    SellerListingDetail,
    SellerListingItem,
    SellerListingsPage,
    SellerListingTotals,
    SellerStats,
    SellerStatsOverview,
)
from ecofinds.services.shaping import (
    build_pagination,
    page_offset,
    primary_image_url,
    product_specs,
    resolve_sort,
)

# "views" counts every row that implies the product was looked at.
VIEW_KINDS = ("VIEWED", "FAVORITE")
FAVORITE_KINDS = ("FAVORITE",)


class StatsService:
    """
    Seller dashboard: the caller's own products, their listing state and
    how buyers interact with them.

    Histograms here are sparse: a status/category key exists only when
    at least one row falls into it.
    """

    def __init__(
        self,
        repo: StatsRepository,
        products: ProductRepository,
        listings: ListingRepository,
        interactions: InteractionRepository,
        users: UserRepository,
    ):
        self.repo = repo
        self.products = products
        self.listings = listings
        self.interactions = interactions
        self.users = users

    def _totals(self, session: Session, seller_id: int) -> SellerListingTotals:
        count, quantity = self.repo.product_totals(session, seller_id)
        return SellerListingTotals(
            total_listings=count,
            total_quantity=quantity,
            by_status=dict(self.repo.status_counts(session, seller_id)),
            by_category=dict(self.repo.category_counts(session, seller_id)),
        )

    def seller_listings(
        self,
        session: Session,
        seller: User,
        *,
        status: str | None = None,
        category: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
        page: int = 1,
        limit: int = 10,
        include_stats: bool = False,
    ) -> SellerListingsPage:
        """
        The caller's products with their listing status.

        status falls back to UNLISTED for products never published.
        Per-item favorites and the aggregate stats block are only
        computed when include_stats is set; the aggregates cover all of
        the seller's products, not just the filtered page.
        """
        try:
            if status is not None:
                status = normalize_status(status)
            if category is not None:
                category = normalize_category(category)
        except ValueError as exc:
            raise ValidationError(str(exc))

        order_by = resolve_sort(Product, sort_by, sort_order, default="created_at")
        skip = page_offset(page, limit)

        products = self.products.list_for_seller(
            session,
            seller.id,
            order_by=order_by,
            skip=skip,
            limit=limit,
            status=status,
            category=category,
        )
        total = self.products.count_for_seller(session, seller.id, status=status, category=category)

        ids = [p.id for p in products]
        images = self.products.images_for_products(session, ids)
        listings = self.listings.for_products(session, ids)
        views = self.interactions.counts_for_products(session, ids, VIEW_KINDS)
        favorites = (
            self.interactions.counts_for_products(session, ids, FAVORITE_KINDS)
            if include_stats
            else {}
        )

        items = [
            SellerListingItem(
                id=p.id,
                title=p.title,
                price=p.price,
                category=p.category,
                condition=p.condition,
                quantity=p.quantity,
                status=listings[p.id].status if p.id in listings else UNLISTED,
                primary_image=primary_image_url(images.get(p.id)),
                created_at=p.created_at,
                updated_at=p.updated_at,
                stats=ListingCounters(
                    views=views.get(p.id, 0),
                    favorites=favorites.get(p.id, 0),
                ),
            )
            for p in products
        ]

        return SellerListingsPage(
            listings=items,
            pagination=build_pagination(page, limit, skip, len(products), total),
            stats=self._totals(session, seller.id) if include_stats else None,
        )

    def seller_stats(self, session: Session, seller: User) -> SellerStats:
        count, quantity = self.repo.product_totals(session, seller.id)
        avg_price, min_price, max_price = self.repo.price_stats(session, seller.id)
        interactions = self.interactions.counts_for_seller(session, seller.id, VIEW_KINDS)

        return SellerStats(
            overview=SellerStatsOverview(
                total_listings=count,
                total_quantity=quantity,
                average_price=round(float(avg_price or 0), 2),
                min_price=float(min_price or 0),
                max_price=float(max_price or 0),
            ),
            status_distribution=dict(self.repo.status_counts(session, seller.id)),
            category_distribution=dict(self.repo.category_counts(session, seller.id)),
            interactions={kind.lower(): n for kind, n in interactions},
        )

    def listing_detail(
        self,
        session: Session,
        seller: User,
        product_id: int,
    ) -> SellerListingDetail:
        """
        One of the caller's products in full, with the five most recent
        viewers.

        Raises:
            NotFoundError(404): unknown id or not the caller's product.
        """
        product = self.products.get_for_seller(session, product_id, seller.id)
        if product is None:
            raise NotFoundError("Listing not found")

        images = self.products.list_images_for_product(session, product.id)
        listing = self.listings.get_for_product(session, product.id)
        views = self.interactions.counts_for_products(session, [product.id], VIEW_KINDS)
        favorites = self.interactions.counts_for_products(session, [product.id], FAVORITE_KINDS)

        viewer_rows = self.interactions.recent_viewers(session, product.id)
        viewer_images = self.users.images_for_users(session, {user.id for _, user in viewer_rows})
        recent = [
            RecentViewer(
                user_id=user.id,
                display_name=user.display_name,
                image_url=viewer_images[user.id].url if user.id in viewer_images else None,
            )
            for _, user in viewer_rows
        ]

        return SellerListingDetail(
            id=product.id,
            title=product.title,
            description=product.description,
            price=product.price,
            category=product.category,
            condition=product.condition,
            quantity=product.quantity,
            status=listing.status if listing else UNLISTED,
            images=[
                ListingDetailImage(id=img.id, url=img.url, is_primary=img.is_primary)
                for img in images
            ],
            specs=product_specs(product),
            stats=ListingDetailStats(
                views=views.get(product.id, 0),
                favorites=favorites.get(product.id, 0),
                recent_viewers=recent,
            ),
            dates=ListingDates(
                created=product.created_at,
                updated=product.updated_at,
                listed=listing.created_at if listing else None,
            ),
        )
