# ecofinds/routers/users.py
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from ecofinds.core.auth import require_auth
from ecofinds.database import get_session
from ecofinds.models.user import User
from ecofinds.repositories.interaction_repo import InteractionRepository
from ecofinds.repositories.listing_repo import ListingRepository
from ecofinds.repositories.product_repo import ProductRepository
from ecofinds.repositories.stats_repo import StatsRepository
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.common import ApiResponse
from ecofinds.schemas.stats import SellerListingDetail, SellerListingsPage, SellerStats
from ecofinds.schemas.user import ProfileRead, ProfileUpsert, UserMeRead
from ecofinds.services.stats_service import StatsService
from ecofinds.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

repo = UserRepository()
service = UserService(repo)
stats_service = StatsService(
    StatsRepository(),
    ProductRepository(),
    ListingRepository(),
    InteractionRepository(),
    repo,
)


# -------- Self profile --------


@router.get("/me", response_model=ApiResponse[UserMeRead])
def read_me(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Return the authenticated user's account fields.
    """
    return ApiResponse(data=service.get_me(session, current_user))


@router.get("/profile", response_model=ApiResponse[ProfileRead])
def read_profile(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return ApiResponse(data=service.get_profile(session, current_user))


@router.post("/profile", response_model=ApiResponse[ProfileRead])
def upsert_profile(
    payload: ProfileUpsert,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Create or replace the caller's contact profile and address.

    - 400 if the phone number is used by another profile.
    """
    data = service.upsert_profile(session, current_user, payload)
    return ApiResponse(message="Profile saved successfully", data=data)


@router.delete("/profile", response_model=ApiResponse[None])
def delete_profile(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    service.delete_profile(session, current_user)
    return ApiResponse(message="Profile deleted successfully")


# -------- Seller dashboard --------


@router.get("/listings", response_model=ApiResponse[SellerListingsPage])
def my_listings(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    status: str | None = None,
    category: str | None = None,
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    include_stats: bool = Query(False, alias="includeStats"),
):
    """
    The caller's products with listing status and interaction counters.

    - `includeStats=true` adds per-item favorites and an aggregate block
      over all of the caller's products.
    """
    data = stats_service.seller_listings(
        session,
        current_user,
        status=status,
        category=category,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
        include_stats=include_stats,
    )
    return ApiResponse(data=data)


@router.get("/listings/stats", response_model=ApiResponse[SellerStats])
def my_listing_stats(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return ApiResponse(data=stats_service.seller_stats(session, current_user))


@router.get("/listings/{product_id}", response_model=ApiResponse[SellerListingDetail])
def my_listing_detail(
    product_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Full view of one of the caller's products, with recent viewers.
    """
    return ApiResponse(data=stats_service.listing_detail(session, current_user, product_id))
