# marketplace/repositories/product_repo.py
from sqlalchemy import case, update
from sqlmodel import Session, select

from marketplace.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (queries + atomic field updates).
    - No commits: the calling service decides transaction boundaries.
    """

    def get_by_id(self, session: Session, product_id: str) -> Product | None:
        return session.get(Product, product_id)

    def list_by_ids(self, session: Session, product_ids: list[str]) -> list[Product]:
        if not product_ids:
            return []
        stmt = select(Product).where(Product.id.in_(product_ids))
        return session.exec(stmt).all()

    def decrement_stock(self, session: Session, product_id: str, quantity: int) -> int | None:
        """
        Atomically subtract `quantity` from stock, flooring at zero.

        Runs as a single UPDATE so two concurrent checkouts cannot both
        write back the same pre-decrement value.

        Returns:
            The new stock, or None if the product does not exist.
        """
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values(
                stock=case(
                    (Product.stock > quantity, Product.stock - quantity),
                    else_=0,
                )
            )
            .execution_options(synchronize_session=False)
        )
        result = session.exec(stmt)
        if result.rowcount == 0:
            return None

        product = session.get(Product, product_id)
        session.refresh(product, attribute_names=["stock"])
        return product.stock

    def set_rating(self, session: Session, product_id: str, rating: float) -> bool:
        """
        Store the recomputed rating. Returns False if the product is gone.
        """
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values(rating=rating)
            .execution_options(synchronize_session=False)
        )
        result = session.exec(stmt)
        return result.rowcount > 0
