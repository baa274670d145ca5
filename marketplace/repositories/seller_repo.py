# marketplace/repositories/seller_repo.py
from sqlalchemy import func, update
from sqlmodel import Session

from marketplace.models.seller import Seller


class SellerRepository:
    """
    Data access layer for Seller.
    No commits here; see ProductRepository.
    """

    def get_by_id(self, session: Session, seller_id: str) -> Seller | None:
        return session.get(Seller, seller_id)

    def add_to_total_sales(self, session: Session, seller_id: str, amount: float) -> bool:
        """
        Atomically add `amount` to total_sales (NULL counts as 0).

        Returns:
            False if the seller does not exist.
        """
        stmt = (
            update(Seller)
            .where(Seller.id == seller_id)
            .values(total_sales=func.coalesce(Seller.total_sales, 0) + amount)
            .execution_options(synchronize_session=False)
        )
        result = session.exec(stmt)
        return result.rowcount > 0
