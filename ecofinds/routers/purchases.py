# ecofinds/routers/purchases.py
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from ecofinds.core.auth import require_auth
from ecofinds.database import get_session
from ecofinds.models.user import User
from ecofinds.repositories.product_repo import ProductRepository
from ecofinds.repositories.purchase_repo import PurchaseRepository
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.common import ApiResponse
from ecofinds.schemas.purchase import PurchaseDetail, PurchaseHistoryPage
from ecofinds.services.purchase_service import PurchaseService

router = APIRouter(prefix="/purchases", tags=["Purchases"])

repo = PurchaseRepository()
service = PurchaseService(repo, ProductRepository(), UserRepository())


@router.get("/history", response_model=ApiResponse[PurchaseHistoryPage])
def purchase_history(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    status: str | None = None,
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
    sort_by: str = Query("purchaseDate", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """
    The caller's purchases, filtered and paginated.

    `summary` always reports lifetime totals over COMPLETED purchases,
    whatever filters are applied to the page.
    """
    data = service.history(
        session,
        current_user,
        status=status,
        start_date=start_date,
        end_date=end_date,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return ApiResponse(data=data)


@router.get("/{purchase_id}", response_model=ApiResponse[PurchaseDetail])
def purchase_detail(
    purchase_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    One of the caller's purchases with product specs and seller contact.
    """
    return ApiResponse(data=service.detail(session, current_user, purchase_id))
