# marketplace/repositories/review_repo.py
from sqlmodel import Session, select

from marketplace.models.review import Review


class ReviewRepository:
    """
    Data access layer for Review.
    """

    def list_for_product(self, session: Session, product_id: str) -> list[Review]:
        """All rows for a product, newest first (ties broken by id)."""
        stmt = (
            select(Review)
            .where(Review.product_id == product_id)
            .order_by(Review.date.desc(), Review.id.desc())
        )
        return session.exec(stmt).all()

    def get_latest_for_customer(
        self,
        session: Session,
        product_id: str,
        customer_id: str,
    ) -> Review | None:
        stmt = (
            select(Review)
            .where(Review.product_id == product_id, Review.customer_id == customer_id)
            .order_by(Review.date.desc(), Review.id.desc())
        )
        return session.exec(stmt).first()

    def save(self, session: Session, review: Review) -> Review:
        session.add(review)
        session.commit()
        session.refresh(review)
        return review
