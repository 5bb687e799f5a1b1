# ecofinds/routers/product_lists.py
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from ecofinds.core.auth import require_auth
from ecofinds.database import get_session
from ecofinds.models.user import User
from ecofinds.repositories.listing_repo import ListingRepository
from ecofinds.repositories.product_repo import ProductRepository
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.common import ApiResponse
from ecofinds.schemas.listing import (
    ListingCreate,
    ListingPage,
    ListingRead,
    ListingStatusUpdate,
)
from ecofinds.services.listing_service import ListingService

router = APIRouter(prefix="/product-lists", tags=["Product lists"])

repo = ListingRepository()
service = ListingService(repo, ProductRepository(), UserRepository())


@router.get("", response_model=ApiResponse[ListingPage])
def list_listings(
    session: Session = Depends(get_session),
    category: str | None = None,
    status: str | None = None,
    seller_id: int | None = Query(None, alias="sellerId"),
    min_price: float | None = Query(None, alias="minPrice", ge=0),
    max_price: float | None = Query(None, alias="maxPrice", ge=0),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """
    Search listings.

    - Public endpoint.
    - Filters are AND-ed; price bounds are inclusive.
    - `sortBy` accepts any listing field (camelCase or snake_case).
    """
    data = service.search(
        session,
        category=category,
        status=status,
        seller_id=seller_id,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return ApiResponse(data=data)


@router.post(
    "",
    response_model=ApiResponse[ListingRead],
    status_code=status.HTTP_201_CREATED,
)
def create_listing(
    payload: ListingCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Publish one of the caller's products (one listing per product).
    """
    data = service.create_listing(session, current_user, payload)
    return ApiResponse(message="Product list entry created successfully", data=data)


@router.patch("/{listing_id}/status", response_model=ApiResponse[ListingRead])
def update_listing_status(
    listing_id: int,
    payload: ListingStatusUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    data = service.update_status(session, current_user, listing_id, payload)
    return ApiResponse(message="Product list entry status updated successfully", data=data)


@router.delete("/{listing_id}", response_model=ApiResponse[None])
def delete_listing(
    listing_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Unpublish a listing; the product stays.
    """
    service.delete_listing(session, current_user, listing_id)
    return ApiResponse(message="Product list entry deleted successfully")
