# ecofinds/routers/user_products.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from ecofinds.core.auth import require_auth
from ecofinds.database import get_session
from ecofinds.models.user import User
from ecofinds.repositories.interaction_repo import InteractionRepository
from ecofinds.repositories.product_repo import ProductRepository
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.common import ApiResponse
from ecofinds.schemas.interaction import (
    InteractionRead,
    InteractionUpsert,
    InteractionWithProduct,
)
from ecofinds.services.interaction_service import InteractionService

router = APIRouter(prefix="/user-products", tags=["User products"])

repo = InteractionRepository()
service = InteractionService(repo, ProductRepository(), UserRepository())


@router.post("", response_model=ApiResponse[InteractionRead])
def record_interaction(
    payload: InteractionUpsert,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Record a favorite / view / wishlist entry for the caller.

    Recording the same (product, interaction) again updates the row.
    """
    data = service.record(session, current_user, payload)
    return ApiResponse(message="Product interaction added successfully", data=data)


@router.get("/{interaction}", response_model=ApiResponse[list[InteractionWithProduct]])
def list_interactions(
    interaction: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return ApiResponse(data=service.list_for_user(session, current_user, interaction))


@router.delete("/{product_id}/{interaction}", response_model=ApiResponse[None])
def remove_interaction(
    product_id: int,
    interaction: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    service.remove(session, current_user, product_id, interaction)
    return ApiResponse(message="Product interaction removed successfully")
