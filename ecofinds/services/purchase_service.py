# ecofinds/services/purchase_service.py
from datetime import datetime
from typing import get_args

from sqlmodel import Session

from ecofinds.core.errors import NotFoundError, ValidationError
from ecofinds.models.purchase import Purchase
from ecofinds.models.user import User
from ecofinds.repositories.product_repo import ProductRepository
from ecofinds.repositories.purchase_repo import PurchaseRepository
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.purchase import (
    PurchaseDetail,
    PurchaseDetailProduct,
    PurchaseDetailSeller,
    PurchaseFacts,
    PurchaseHistoryItem,
    PurchaseHistoryPage,
    PurchaseImage,
    PurchaseProductBrief,
    PurchaseSeller,
    PurchaseStatus,
    PurchaseSummary,
)
from ecofinds.schemas.user import AddressRead
from ecofinds.services.shaping import (
    build_pagination,
    page_offset,
    primary_image_url,
    product_specs,
    resolve_sort,
)

PURCHASE_STATUSES: tuple[str, ...] = get_args(PurchaseStatus)


class PurchaseService:
    """
    Read side of purchase history (rows are written at checkout).

    Only the caller's own purchases are ever visible; a foreign id reads
    as not found.
    """

    def __init__(
        self,
        repo: PurchaseRepository,
        products: ProductRepository,
        users: UserRepository,
    ):
        self.repo = repo
        self.products = products
        self.users = users

    def _sellers(self, session: Session, seller_ids: set[int]) -> dict[int, PurchaseSeller]:
        users = self.users.get_many(session, seller_ids)
        images = self.users.images_for_users(session, seller_ids)
        profiles = self.users.profiles_for_users(session, seller_ids)
        return {
            uid: PurchaseSeller(
                id=user.id,
                name=user.display_name,
                email=user.email,
                image=images[uid].url if uid in images else None,
                phone=profiles[uid].phone_number if uid in profiles else None,
            )
            for uid, user in users.items()
        }

    def history(
        self,
        session: Session,
        user: User,
        *,
        status: str | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> PurchaseHistoryPage:
        """
        Paginated purchase history of the caller.

        Filters (status, inclusive date range) scope the page only. The
        summary block is always the caller's lifetime totals over
        COMPLETED purchases, where total spent is sum(price * quantity).
        """
        if status is not None:
            status = status.strip().upper()
            if status not in PURCHASE_STATUSES:
                raise ValidationError(
                    f"Unknown status '{status}'. Allowed: {', '.join(PURCHASE_STATUSES)}"
                )
        if start_date and end_date and start_date > end_date:
            raise ValidationError("startDate cannot be after endDate")

        filters = dict(status=status, start_date=start_date, end_date=end_date)
        order_by = resolve_sort(Purchase, sort_by, sort_order, default="purchase_date")
        skip = page_offset(page, limit)

        purchases = self.repo.list_for_user(
            session, user.id, order_by=order_by, skip=skip, limit=limit, **filters
        )
        total = self.repo.count_for_user(session, user.id, **filters)

        product_ids = [p.product_id for p in purchases]
        products = self.products.get_many(session, product_ids)
        images = self.products.images_for_products(session, product_ids)
        sellers = self._sellers(session, {p.seller_id for p in products.values()})

        items = []
        for purchase in purchases:
            product = products[purchase.product_id]
            items.append(
                PurchaseHistoryItem(
                    id=purchase.id,
                    product=PurchaseProductBrief(
                        id=product.id,
                        name=product.title,
                        category=product.category,
                        primary_image=primary_image_url(images.get(product.id)),
                    ),
                    seller=sellers[product.seller_id],
                    quantity=purchase.quantity,
                    price_at_purchase=purchase.price_at_purchase,
                    total_amount=round(purchase.price_at_purchase * purchase.quantity, 2),
                    status=purchase.status,
                    purchase_date=purchase.purchase_date,
                    updated_at=purchase.updated_at,
                )
            )

        count, units, spent = self.repo.completed_totals(session, user.id)
        return PurchaseHistoryPage(
            purchases=items,
            pagination=build_pagination(page, limit, skip, len(purchases), total),
            summary=PurchaseSummary(
                total_purchases=count,
                total_items=units,
                total_spent=round(spent, 2),
            ),
        )

    def detail(self, session: Session, user: User, purchase_id: int) -> PurchaseDetail:
        purchase = self.repo.get_for_user(session, purchase_id, user.id)
        if purchase is None:
            raise NotFoundError("Purchase not found")

        product = self.products.get_by_id(session, purchase.product_id)
        images = self.products.list_images_for_product(session, product.id)
        seller = self._sellers(session, {product.seller_id})[product.seller_id]

        profile = self.users.get_profile(session, product.seller_id)
        address = self.users.get_address(session, profile.id) if profile else None

        return PurchaseDetail(
            id=purchase.id,
            product=PurchaseDetailProduct(
                id=product.id,
                name=product.title,
                description=product.description,
                category=product.category,
                condition=product.condition,
                images=[PurchaseImage(url=img.url, is_primary=img.is_primary) for img in images],
                specifications=product_specs(product),
            ),
            seller=PurchaseDetailSeller(
                **seller.model_dump(),
                address=AddressRead.model_validate(address) if address else None,
            ),
            purchase=PurchaseFacts(
                quantity=purchase.quantity,
                price_at_purchase=purchase.price_at_purchase,
                total_amount=round(purchase.price_at_purchase * purchase.quantity, 2),
                status=purchase.status,
                purchase_date=purchase.purchase_date,
                updated_at=purchase.updated_at,
            ),
        )
