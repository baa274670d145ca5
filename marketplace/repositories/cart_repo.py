# marketplace/repositories/cart_repo.py
from sqlmodel import Session, select

from marketplace.models.cart import Cart, CartItem


class CartRepository:

    # Cart header
    def get_cart(self, session: Session, user_id: str) -> Cart | None:
        return session.get(Cart, user_id)

    def create_cart(self, session: Session, user_id: str) -> Cart:
        cart = Cart(user_id=user_id)
        session.add(cart)
        session.flush()
        return cart

    # Items
    def list_items(self, session: Session, user_id: str) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.id)
        )
        return session.exec(stmt).all()

    def get_item(self, session: Session, user_id: str, product_id: str) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        return session.exec(stmt).first()

    def add_item(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.flush()
        return item

    def delete_item(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.flush()

    def delete_cart(self, session: Session, user_id: str) -> bool:
        """
        Delete the cart record and its items (no commit).

        Returns:
            False if the user had no cart.
        """
        cart = self.get_cart(session, user_id)
        for row in self.list_items(session, user_id):
            session.delete(row)
        if cart is None:
            session.flush()
            return False
        session.delete(cart)
        session.flush()
        return True
