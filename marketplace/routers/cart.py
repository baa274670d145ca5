# marketplace/routers/cart.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from marketplace.core.auth import require_owner
from marketplace.database import get_session
from marketplace.repositories.cart_repo import CartRepository
from marketplace.schemas.cart import CartItemCreate, CartItemUpdate, CartRead, MessageRead
from marketplace.services.cart_service import CartService

router = APIRouter(
    prefix="/users/{user_id}/cart",
    tags=["Cart"],
    dependencies=[Depends(require_owner)],
)

cart_repo = CartRepository()
service = CartService(cart_repo)


@router.get("", response_model=CartRead)
def get_cart(
    user_id: str,
    session: Session = Depends(get_session),
):
    """
    Get the user's cart. No cart yet => empty item list.
    """
    return service.get_cart(session, user_id)


@router.post("", response_model=CartRead, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    user_id: str,
    payload: CartItemCreate,
    session: Session = Depends(get_session),
):
    """
    Add a product to the cart, merging with an existing line.
    """
    return service.add_item(session, user_id, payload)


@router.patch("/{product_id}", response_model=CartRead)
def update_cart_item(
    user_id: str,
    product_id: str,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
):
    """
    Update quantity of a product in the cart.
    """
    return service.update_quantity(session, user_id, product_id, payload)


@router.delete("/{product_id}", response_model=CartRead)
def remove_cart_item(
    user_id: str,
    product_id: str,
    session: Session = Depends(get_session),
):
    """
    Remove a product from the cart.
    """
    return service.remove_item(session, user_id, product_id)


@router.delete("", response_model=MessageRead)
def clear_cart(
    user_id: str,
    session: Session = Depends(get_session),
):
    """
    Delete the entire cart.
    """
    service.clear_cart(session, user_id)
    return MessageRead(message="Cart cleared")
