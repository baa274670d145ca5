# marketplace/services/cart_service.py
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from marketplace.models.cart import Cart, CartItem
from marketplace.repositories.cart_repo import CartRepository
from marketplace.schemas.cart import (
    CartItemCreate,
    CartItemRead,
    CartItemUpdate,
    CartRead,
)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - one cart per user, created on first add
      - merge repeated adds of the same product, capped by the stock
        snapshot sent with the item
      - the cart row is deleted (not emptied) on clear
    """

    def __init__(self, cart_repo: CartRepository):
        self.cart_repo = cart_repo

    # ---- internal helpers ----

    def _get_cart_or_404(self, session: Session, user_id: str) -> Cart:
        cart = self.cart_repo.get_cart(session, user_id)
        if not cart:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cart not found",
            )
        return cart

    def _touch(self, session: Session, cart: Cart) -> None:
        cart.updated_at = datetime.now(timezone.utc)
        session.add(cart)
        session.commit()

    # ---- public operations ----

    def get_cart(self, session: Session, user_id: str) -> CartRead:
        """
        Return the user's cart; a user without a cart gets an empty one.
        """
        cart = self.cart_repo.get_cart(session, user_id)
        items = self.cart_repo.list_items(session, user_id) if cart else []
        return CartRead(
            user_id=user_id,
            items=[CartItemRead.model_validate(it) for it in items],
            updated_at=cart.updated_at if cart else None,
        )

    def add_item(self, session: Session, user_id: str, payload: CartItemCreate) -> CartRead:
        """
        Add a product to the user's cart.

        Rules:
          - first add creates the cart
          - product already in cart => quantity = min(old + new, stock)
          - otherwise a new line is appended
        """
        cart = self.cart_repo.get_cart(session, user_id)
        if cart is None:
            cart = self.cart_repo.create_cart(session, user_id)

        existing = self.cart_repo.get_item(session, user_id, payload.product_id)

        if existing:
            new_qty = existing.quantity + payload.quantity
            cap = payload.stock if payload.stock is not None else existing.stock
            if cap is not None:
                new_qty = min(new_qty, cap)
            existing.quantity = new_qty
            if payload.stock is not None:
                existing.stock = payload.stock
            session.add(existing)
        else:
            self.cart_repo.add_item(
                session,
                CartItem(
                    user_id=user_id,
                    product_id=payload.product_id,
                    name=payload.name,
                    price=payload.price,
                    image=payload.image,
                    seller_name=payload.seller_name,
                    quantity=payload.quantity,
                    stock=payload.stock,
                ),
            )

        self._touch(session, cart)
        return self.get_cart(session, user_id)

    def update_quantity(
        self,
        session: Session,
        user_id: str,
        product_id: str,
        payload: CartItemUpdate,
    ) -> CartRead:
        """
        Set the quantity of an item already in the cart.
        """
        cart = self._get_cart_or_404(session, user_id)
        item = self.cart_repo.get_item(session, user_id, product_id)
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not found in cart",
            )

        item.quantity = payload.quantity
        session.add(item)
        self._touch(session, cart)
        return self.get_cart(session, user_id)

    def remove_item(self, session: Session, user_id: str, product_id: str) -> CartRead:
        """
        Remove a product from the cart. Removing an absent product is a no-op.
        """
        cart = self._get_cart_or_404(session, user_id)
        item = self.cart_repo.get_item(session, user_id, product_id)
        if item:
            self.cart_repo.delete_item(session, item)
        self._touch(session, cart)
        return self.get_cart(session, user_id)

    def clear_cart(self, session: Session, user_id: str) -> None:
        """
        Delete the cart record entirely.
        """
        self.cart_repo.delete_cart(session, user_id)
        session.commit()
