# ecofinds/routers/cart.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from ecofinds.core.auth import require_auth
from ecofinds.database import get_session
from ecofinds.models.user import User
from ecofinds.repositories.interaction_repo import InteractionRepository
from ecofinds.repositories.listing_repo import ListingRepository
from ecofinds.repositories.product_repo import ProductRepository
from ecofinds.repositories.user_repo import UserRepository
from ecofinds.schemas.cart import CartItemCreate, CartItemRead, CartItemUpdate, CartSummary
from ecofinds.schemas.common import ApiResponse
from ecofinds.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

interaction_repo = InteractionRepository()
product_repo = ProductRepository()
service = CartService(interaction_repo, product_repo, ListingRepository(), UserRepository())


@router.get("", response_model=ApiResponse[CartSummary])
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Get the current user's cart with line totals and summary.
    """
    return ApiResponse(data=service.get_cart(session, current_user))


@router.post("/add", response_model=ApiResponse[CartItemRead])
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Put a product in the cart.

    Adding a product that is already in the cart sets its quantity.
    """
    data = service.add_item(session, current_user, payload)
    return ApiResponse(message="Product added to cart successfully", data=data)


@router.patch("/update/{item_id}", response_model=ApiResponse[CartItemRead])
def update_cart_item(
    item_id: int,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    data = service.update_item(session, current_user, item_id, payload)
    return ApiResponse(message="Cart item updated successfully", data=data)


@router.delete("/remove/{item_id}", response_model=ApiResponse[None])
def remove_cart_item(
    item_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    service.remove_item(session, current_user, item_id)
    return ApiResponse(message="Item removed from cart successfully")


@router.delete("/clear", response_model=ApiResponse[None])
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Remove every item from the cart (no-op when already empty).
    """
    service.clear(session, current_user)
    return ApiResponse(message="Cart cleared successfully")
