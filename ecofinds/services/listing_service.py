# ecofinds/services/listing_service.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from ecofinds.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from ecofinds.models.product import ProductListing
from ecofinds.models.user import User, utcnow
from ecofinds.repositories.listing_repo import ListingRepository
from ecofinds.repositories.product_repo import ProductRepository
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.listing import (
    ListingCreate,
    ListingPage,
    ListingProduct,
    ListingRead,
    ListingStatusUpdate,
    ListingWithProduct,
    normalize_status,
)
from ecofinds.schemas.product import normalize_category
from ecofinds.services.shaping import (
    CatalogShaper,
    build_pagination,
    page_offset,
    primary_image_url,
    resolve_sort,
)

logger = logging.getLogger(__name__)

ALREADY_LISTED = "Product already has a list entry"


class ListingService:
    """
    Business logic for product listings (the published state of a product).

    Responsibilities:
      - filtered, sorted, paginated listing search
      - owner-only publish / status change / unpublish
      - one listing per product, even under concurrent publishes
    """

    def __init__(
        self,
        repo: ListingRepository,
        products: ProductRepository,
        users: UserRepository,
    ):
        self.repo = repo
        self.products = products
        self.shaper = CatalogShaper(products, users)

    def _get_owned_listing(
        self,
        session: Session,
        user: User,
        listing_id: int,
        action: str,
    ) -> ProductListing:
        listing = self.repo.get_by_id(session, listing_id)
        if listing is None:
            raise NotFoundError("Product list entry not found")
        if listing.seller_id != user.id:
            raise ForbiddenError(f"Not authorized to {action} this product list entry")
        return listing

    # ----- Reads -----

    def search(
        self,
        session: Session,
        *,
        category: str | None = None,
        status: str | None = None,
        seller_id: int | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> ListingPage:
        """
        Listings matching every supplied filter (omitted filters are not
        applied). Price bounds are inclusive; category and status are
        case-normalized.

        Each item carries its product with images, seller summary and
        primary image.
        """
        try:
            if category is not None:
                category = normalize_category(category)
            if status is not None:
                status = normalize_status(status)
        except ValueError as exc:
            raise ValidationError(str(exc))

        if min_price is not None and max_price is not None and min_price > max_price:
            raise ValidationError("minPrice cannot be greater than maxPrice")

        filters = dict(
            category=category,
            status=status,
            seller_id=seller_id,
            min_price=min_price,
            max_price=max_price,
        )
        order_by = resolve_sort(ProductListing, sort_by, sort_order, default="created_at")
        skip = page_offset(page, limit)

        listings = self.repo.search(
            session, order_by=order_by, skip=skip, limit=limit, **filters
        )
        total = self.repo.count(session, **filters)

        products = self.products.get_many(session, [row.product_id for row in listings])
        reads = {
            read.id: read
            for read in self.shaper.reads(session, list(products.values()))
        }

        items = []
        for row in listings:
            read = reads[row.product_id]
            items.append(
                ListingWithProduct(
                    **row.model_dump(),
                    product=ListingProduct(
                        **read.model_dump(),
                        primary_image=primary_image_url(read.images),
                    ),
                )
            )

        return ListingPage(
            items=items,
            pagination=build_pagination(page, limit, skip, len(listings), total),
        )

    # ----- Writes -----

    def create_listing(
        self,
        session: Session,
        user: User,
        payload: ListingCreate,
    ) -> ListingRead:
        """
        Publish one of the caller's products.

        The listing copies the product's title/price/category.

        Raises:
            NotFoundError(404): unknown product.
            ForbiddenError(403): product belongs to someone else.
            ConflictError(400): product is already listed.
        """
        product = self.products.get_by_id(session, payload.product_id)
        if product is None:
            raise NotFoundError("Product not found")
        if product.seller_id != user.id:
            raise ForbiddenError("Not authorized to list this product")
        if self.repo.get_for_product(session, product.id) is not None:
            raise ConflictError(ALREADY_LISTED)

        listing = ProductListing(
            product_id=product.id,
            seller_id=user.id,
            name=product.title,
            price=product.price,
            category=product.category,
            status=payload.status,
        )
        try:
            listing = self.repo.create(session, listing)
        except IntegrityError:
            logger.info("Concurrent listing of product %s rejected", product.id)
            raise ConflictError(ALREADY_LISTED)

        return ListingRead.model_validate(listing)

    def update_status(
        self,
        session: Session,
        user: User,
        listing_id: int,
        payload: ListingStatusUpdate,
    ) -> ListingRead:
        listing = self._get_owned_listing(session, user, listing_id, "update")
        listing.status = payload.status
        listing.updated_at = utcnow()
        return ListingRead.model_validate(self.repo.update(session, listing))

    def delete_listing(self, session: Session, user: User, listing_id: int) -> None:
        """Unpublish; the product itself stays."""
        listing = self._get_owned_listing(session, user, listing_id, "delete")
        self.repo.delete(session, listing)
