# ecofinds/services/cart_service.py
from sqlmodel import Session

from ecofinds.core.errors import InsufficientStockError, NotFoundError
from ecofinds.models.interaction import UserProduct
from ecofinds.models.product import Product
from ecofinds.models.user import User, utcnow
from ecofinds.repositories.interaction_repo import InteractionRepository
from ecofinds.repositories.listing_repo import ListingRepository
from ecofinds.repositories.product_repo import ProductRepository
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.cart import (
    CartDetails,
    CartItemCreate,
    CartItemRead,
    CartItemUpdate,
    CartLine,
    CartLineProduct,
    CartLineSeller,
    CartProduct,
    CartSummary,
    CategoryBreakdown,
)
from ecofinds.services.shaping import CatalogShaper, primary_image_url

CART = "CART"


class CartService:
    """
    Business logic for cart operations.

    The cart is the set of the caller's UserProduct rows with
    interaction=CART; each row carries a quantity.

    Responsibilities:
      - validate product existence
      - enforce quantity <= product.quantity (stock on hand)
      - adding a product already in the cart replaces its quantity
      - compute line totals and per-category breakdown
    """

    def __init__(
        self,
        repo: InteractionRepository,
        products: ProductRepository,
        listings: ListingRepository,
        users: UserRepository,
    ):
        self.repo = repo
        self.products = products
        self.listings = listings
        self.users = users
        self.shaper = CatalogShaper(products, users)

    # ---- internal helpers ----

    def _get_product(self, session: Session, product_id: int) -> Product:
        product = self.products.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def _check_stock(product: Product, quantity: int) -> None:
        if quantity > product.quantity:
            raise InsufficientStockError(product.quantity)

    def _get_cart_item(self, session: Session, user: User, item_id: int) -> UserProduct:
        item = self.repo.get_owned(session, item_id, user.id, CART)
        if item is None:
            raise NotFoundError("Cart item not found")
        return item

    def _item_read(self, session: Session, item: UserProduct, product: Product) -> CartItemRead:
        images = self.products.list_images_for_product(session, product.id)
        seller = self.shaper.sellers(session, {product.seller_id})[product.seller_id]
        return CartItemRead(
            id=item.id,
            user_id=item.user_id,
            product_id=item.product_id,
            interaction=item.interaction,
            quantity=item.quantity,
            product=CartProduct(
                id=product.id,
                title=product.title,
                category=product.category,
                price=product.price,
                quantity=product.quantity,
                condition=product.condition,
                primary_image=primary_image_url(images),
                seller=seller,
            ),
            created_at=item.created_at,
            updated_at=item.updated_at,
        )

    # ---- public operations ----

    def add_item(
        self,
        session: Session,
        user: User,
        payload: CartItemCreate,
    ) -> CartItemRead:
        """
        Put a product in the caller's cart.

        Rules:
          - product must exist
          - quantity <= stock on hand
          - if the product is already in the cart, its quantity is
            replaced (not summed)
        """
        product = self._get_product(session, payload.product_id)
        self._check_stock(product, payload.quantity)

        item = self.repo.upsert(
            session,
            user_id=user.id,
            product_id=product.id,
            interaction=CART,
            quantity=payload.quantity,
        )
        return self._item_read(session, item, product)

    def get_cart(self, session: Session, user: User) -> CartSummary:
        """
        Return the cart, most recently added first, with:
          - per-line totals (price * quantity)
          - total units, distinct products and subtotal (2 dp)
          - a per-category breakdown in first-seen order
        """
        items = self.repo.list_for_user(session, user.id, CART)
        product_ids = [it.product_id for it in items]

        products = self.products.get_many(session, product_ids)
        images = self.products.images_for_products(session, product_ids)
        listings = self.listings.for_products(session, product_ids)

        seller_ids = {p.seller_id for p in products.values()}
        sellers = self.users.get_many(session, seller_ids)
        seller_images = self.users.images_for_users(session, seller_ids)
        seller_profiles = self.users.profiles_for_users(session, seller_ids)

        lines: list[CartLine] = []
        total_items = 0
        subtotal = 0.0
        by_category: dict[str, list] = {}

        for it in items:
            product = products[it.product_id]
            seller = sellers[product.seller_id]
            quantity = it.quantity or 0
            line_total = product.price * quantity

            total_items += quantity
            subtotal += line_total
            bucket = by_category.setdefault(product.category, [0, 0.0])
            bucket[0] += quantity
            bucket[1] += line_total

            listing = listings.get(product.id)
            image = seller_images.get(seller.id)
            profile = seller_profiles.get(seller.id)
            lines.append(
                CartLine(
                    id=it.id,
                    product=CartLineProduct(
                        id=product.id,
                        name=product.title,
                        category=product.category,
                        image_url=primary_image_url(images.get(product.id)),
                        price=product.price,
                        stock=product.quantity,
                        status=listing.status if listing else "ACTIVE",
                    ),
                    seller=CartLineSeller(
                        id=seller.id,
                        name=seller.display_name,
                        email=seller.email,
                        image=image.url if image else None,
                        phone=profile.phone_number if profile else None,
                    ),
                    quantity=quantity,
                    total_price=line_total,
                    item_total=round(line_total, 2),
                    added_at=it.created_at,
                    updated_at=it.updated_at,
                )
            )

        return CartSummary(
            cart_details=CartDetails(
                total_items=total_items,
                unique_items=len(items),
                subtotal=round(subtotal, 2),
                items_by_category=[
                    CategoryBreakdown(category=cat, item_count=count, subtotal=round(total, 2))
                    for cat, (count, total) in by_category.items()
                ],
            ),
            items=lines,
        )

    def update_item(
        self,
        session: Session,
        user: User,
        item_id: int,
        payload: CartItemUpdate,
    ) -> CartItemRead:
        """
        Set the quantity of one of the caller's cart rows.
        Stock is re-checked against the product's current quantity.
        """
        item = self._get_cart_item(session, user, item_id)
        product = self._get_product(session, item.product_id)
        self._check_stock(product, payload.quantity)

        item.quantity = payload.quantity
        item.updated_at = utcnow()
        item = self.repo.update(session, item)
        return self._item_read(session, item, product)

    def remove_item(self, session: Session, user: User, item_id: int) -> None:
        item = self._get_cart_item(session, user, item_id)
        self.repo.delete(session, item)

    def clear(self, session: Session, user: User) -> None:
        self.repo.clear_for_user(session, user.id, CART)
