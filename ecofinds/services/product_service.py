# ecofinds/services/product_service.py
import logging

from sqlmodel import Session

from ecofinds.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from ecofinds.core.storage_utils import delete_public_url
from ecofinds.models.product import Product
from ecofinds.models.user import User, utcnow
from ecofinds.repositories.interaction_repo import InteractionRepository
from ecofinds.repositories.listing_repo import ListingRepository
from ecofinds.repositories.product_repo import ProductRepository
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.product import (
    PRODUCT_CATEGORIES,
    CategoryBucket,
    ProductCreate,
    ProductDetail,
    ProductDetailPayload,
    ProductListingBrief,
    ProductPage,
    ProductRead,
    ProductSummaryPage,
    ProductUpdate,
    ViewerInteraction,
    normalize_category,
)
from ecofinds.schemas.user import SellerAddress, SellerDetail, SellerProfile
from ecofinds.services.shaping import (
    CatalogShaper,
    build_pagination,
    image_reads,
    page_offset,
    primary_image_url,
)

logger = logging.getLogger(__name__)

RELATED_LIMIT = 6
SELLER_OTHER_LIMIT = 4


class ProductService:
    """
    Business logic for products.

    Responsibilities:
      - catalog reads (paginated list, detail page, category views)
      - owner-only create/update/delete
      - keep a listing's denormalized name/price/category in step with
        its product
    """

    def __init__(
        self,
        repo: ProductRepository,
        users: UserRepository,
        listings: ListingRepository,
        interactions: InteractionRepository,
    ):
        self.repo = repo
        self.users = users
        self.listings = listings
        self.interactions = interactions
        self.shaper = CatalogShaper(repo, users)

    # ----- Helpers -----

    def get_product(self, session: Session, product_id: int) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def get_owned_product(
        self,
        session: Session,
        user: User,
        product_id: int,
        action: str = "modify",
    ) -> Product:
        """
        Load a product the caller is about to modify.

        Raises:
            NotFoundError(404): unknown id.
            ForbiddenError(403): caller is not the seller.
        """
        product = self.get_product(session, product_id)
        if product.seller_id != user.id:
            raise ForbiddenError(f"Not authorized to {action} this product")
        return product

    # ----- Reads -----

    def list_products(self, session: Session, page: int = 1, limit: int = 20) -> ProductPage:
        """
        All products, newest first, with images and seller summary.
        """
        skip = page_offset(page, limit)
        products = self.repo.list_page(session, skip=skip, limit=limit)
        total = self.repo.count(session)
        return ProductPage(
            products=self.shaper.reads(session, products),
            pagination=build_pagination(page, limit, skip, len(products), total),
        )

    def get_product_detail(
        self,
        session: Session,
        product_id: int,
        viewer: User | None = None,
    ) -> ProductDetailPayload:
        """
        Product detail page.

        Besides the product itself (images, seller with contact profile,
        listing, favorite count), this attaches:
          - the viewer's own interaction rows (empty for guests)
          - up to 6 related products (same category)
          - up to 4 other products of the same seller
        Related lists exclude the product itself and are newest first.
        """
        product = self.get_product(session, product_id)

        images = self.repo.list_images_for_product(session, product.id)
        seller = self.shaper.sellers(session, {product.seller_id})[product.seller_id]

        profile = self.users.get_profile(session, product.seller_id)
        address = self.users.get_address(session, profile.id) if profile else None
        location = SellerAddress(
            city=address.city if address else None,
            state=address.state if address else None,
            country=address.country if address else None,
        )
        seller_detail = SellerDetail(
            **seller.model_dump(),
            profile=SellerProfile(
                full_name=profile.full_name,
                phone_number=profile.phone_number,
                address=location if address else None,
            )
            if profile
            else None,
        )

        listing = self.listings.get_for_product(session, product.id)
        favorites = self.repo.favorite_counts(session, [product.id])

        viewer_rows = []
        if viewer is not None:
            viewer_rows = [
                ViewerInteraction.model_validate(row)
                for row in self.interactions.list_for_viewer(session, viewer.id, product.id)
            ]

        detail = ProductDetail(
            **product.model_dump(),
            images=image_reads(images),
            seller=seller_detail,
            listing=ProductListingBrief.model_validate(listing) if listing else None,
            primary_image=primary_image_url(images),
            favorite_count=favorites.get(product.id, 0),
            user_interactions=viewer_rows,
            seller_location=location,
        )

        related = self.repo.list_related(session, product.category, product.id, RELATED_LIMIT)
        others = self.repo.list_by_seller(
            session, product.seller_id, product.id, SELLER_OTHER_LIMIT
        )
        return ProductDetailPayload(
            product=detail,
            related_products=self.shaper.summaries(session, related),
            seller_other_products=self.shaper.summaries(session, others),
        )

    def products_by_category(
        self,
        session: Session,
        hide_empty: bool = False,
    ) -> list[CategoryBucket]:
        """
        Catalog grouped by category.

        One bucket per known category in enumeration order, including
        empty ones unless hide_empty is set. Products inside a bucket are
        newest first. A single query feeds all buckets.
        """
        summaries = self.shaper.summaries(session, self.repo.list_all(session))
        grouped: dict[str, list] = {category: [] for category in PRODUCT_CATEGORIES}
        for summary in summaries:
            grouped.setdefault(summary.category, []).append(summary)

        return [
            CategoryBucket(category=category, products=products)
            for category, products in grouped.items()
            if products or not hide_empty
        ]

    def products_in_category(
        self,
        session: Session,
        category: str,
        page: int = 1,
        limit: int = 10,
    ) -> ProductSummaryPage:
        try:
            category = normalize_category(category)
        except ValueError as exc:
            raise ValidationError(str(exc))

        skip = page_offset(page, limit)
        products = self.repo.list_page(session, skip=skip, limit=limit, category=category)
        total = self.repo.count(session, category=category)
        return ProductSummaryPage(
            products=self.shaper.summaries(session, products),
            pagination=build_pagination(page, limit, skip, len(products), total),
        )

    # ----- Writes -----

    def create_product(
        self,
        session: Session,
        seller: User,
        payload: ProductCreate,
    ) -> ProductRead:
        """
        Create a product owned by the caller.

        The seller always comes from the token, never from the body.
        """
        product = Product(**payload.model_dump(), seller_id=seller.id)
        product = self.repo.create(session, product)
        logger.info("Product %s created by user %s", product.id, seller.id)
        return self.shaper.read(session, product)

    def update_product(
        self,
        session: Session,
        user: User,
        product_id: int,
        payload: ProductUpdate,
    ) -> ProductRead:
        """
        Partial update: only fields present in the request are written.

        If the product is listed, the listing's name/price/category copies
        follow the product.
        """
        product = self.get_owned_product(session, user, product_id, "update")

        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(product, field, value)
        product.updated_at = utcnow()
        product = self.repo.update(session, product)

        listing = self.listings.get_for_product(session, product.id)
        if listing is not None:
            listing.name = product.title
            listing.price = product.price
            listing.category = product.category
            self.listings.update(session, listing)

        return self.shaper.read(session, product)

    def delete_product(self, session: Session, user: User, product_id: int) -> None:
        """
        Delete a product with its images, listing and interaction rows.

        Image files are removed from storage best-effort. A product that
        appears in purchase history is kept.

        Raises:
            ConflictError(400): product has purchases.
        """
        product = self.get_owned_product(session, user, product_id, "delete")

        if self.repo.has_purchases(session, product.id):
            raise ConflictError("Cannot delete a product with purchase history")

        for url in self.repo.delete_with_dependents(session, product):
            delete_public_url(url)
        logger.info("Product %s deleted by user %s", product_id, user.id)
