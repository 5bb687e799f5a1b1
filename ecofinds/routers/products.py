# ecofinds/routers/products.py
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from ecofinds.core.auth import get_current_user, require_auth
from ecofinds.database import get_session
from ecofinds.models.user import User
from ecofinds.repositories.interaction_repo import InteractionRepository
from ecofinds.repositories.listing_repo import ListingRepository
from ecofinds.repositories.product_repo import ProductRepository
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.common import ApiResponse
from ecofinds.schemas.product import (
    CategoryBucket,
    ProductCreate,
    ProductDetailPayload,
    ProductPage,
    ProductRead,
    ProductSummaryPage,
    ProductUpdate,
)
from ecofinds.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(
    repo,
    UserRepository(),
    ListingRepository(),
    InteractionRepository(),
)


# -------- Public endpoints --------


@router.get("", response_model=ApiResponse[ProductPage])
def list_products(
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    """
    List products, newest first.

    - Public endpoint.
    - Paginated (`page`, `limit`).
    """
    return ApiResponse(data=service.list_products(session, page=page, limit=limit))


@router.get("/by-category", response_model=ApiResponse[list[CategoryBucket]])
def products_by_category(
    session: Session = Depends(get_session),
    hide_empty: bool = Query(False, alias="hideEmpty"),
):
    """
    Catalog grouped by category, one bucket per category.

    - Public endpoint.
    - `hideEmpty=true` drops categories without products.
    """
    return ApiResponse(data=service.products_by_category(session, hide_empty=hide_empty))


@router.get("/category/{category}", response_model=ApiResponse[ProductSummaryPage])
def products_in_category(
    category: str,
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """
    Paginated products of one category (case-insensitive), newest first.
    """
    return ApiResponse(
        data=service.products_in_category(session, category, page=page, limit=limit)
    )


@router.get("/{product_id}", response_model=ApiResponse[ProductDetailPayload])
def get_product(
    product_id: int,
    session: Session = Depends(get_session),
    viewer: User | None = Depends(get_current_user),
):
    """
    Product detail page.

    - Public endpoint; with a token the caller's own interactions with
      the product are included.
    """
    return ApiResponse(data=service.get_product_detail(session, product_id, viewer))


# -------- Seller endpoints --------


@router.post(
    "",
    response_model=ApiResponse[ProductRead],
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Create a product owned by the caller.
    """
    data = service.create_product(session, current_user, payload)
    return ApiResponse(message="Product created successfully", data=data)


@router.put("/{product_id}", response_model=ApiResponse[ProductRead])
def update_product(
    product_id: int,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Partially update one of the caller's products.
    """
    data = service.update_product(session, current_user, product_id, payload)
    return ApiResponse(message="Product updated successfully", data=data)


@router.delete("/{product_id}", response_model=ApiResponse[None])
def delete_product(
    product_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Delete one of the caller's products with its images, listing and
    interaction rows.
    """
    service.delete_product(session, current_user, product_id)
    return ApiResponse(message="Product deleted successfully")
