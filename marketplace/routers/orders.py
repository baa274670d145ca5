# marketplace/routers/orders.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from marketplace.core.auth import require_owner
from marketplace.core.config import get_settings
from marketplace.database import get_session
from marketplace.repositories.cart_repo import CartRepository
from marketplace.repositories.order_repo import OrderRepository
from marketplace.repositories.product_repo import ProductRepository
from marketplace.repositories.seller_repo import SellerRepository
from marketplace.schemas.order import OrderCreate, OrderRead
from marketplace.services.order_service import OrderService

router = APIRouter(tags=["Orders"])

order_repo = OrderRepository()
product_repo = ProductRepository()
seller_repo = SellerRepository()
cart_repo = CartRepository()
service = OrderService(order_repo, product_repo, seller_repo, cart_repo)


# -------- User-scoped endpoints --------


@router.post(
    "/users/{user_id}/orders",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_owner)],
)
def place_order(
    user_id: str,
    payload: OrderCreate,
    session: Session = Depends(get_session),
):
    """
    Place an order: create it, deduct stock, credit sellers, delete the cart.

    Auth:
      - Bearer token whose id matches {user_id}.

    Behaviour on missing products/sellers depends on CHECKOUT_MODE
    (lenient: skipped, strict: 409 and nothing written).
    """
    strict = get_settings().CHECKOUT_MODE == "strict"
    return service.place_order(session, user_id, payload, strict=strict)


@router.get(
    "/users/{user_id}/orders",
    response_model=list[OrderRead],
    dependencies=[Depends(require_owner)],
)
def list_my_orders(
    user_id: str,
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 100,
):
    """
    List the authenticated user's orders, newest first.
    """
    return service.list_customer_orders(session, user_id, skip, limit)


# -------- Legacy public endpoint --------


@router.get("/orders/user/{user_id}", response_model=list[OrderRead])
def list_orders_for_user(
    user_id: str,
    session: Session = Depends(get_session),
):
    """
    List all of a customer's orders (no auth, no paging; kept for older
    storefront builds).
    """
    return service.list_customer_orders(session, user_id, limit=None)
