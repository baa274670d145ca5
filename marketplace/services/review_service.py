# marketplace/services/review_service.py
import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from marketplace.core.ids import generate_id
from marketplace.models.review import Review
from marketplace.repositories.product_repo import ProductRepository
from marketplace.repositories.review_repo import ReviewRepository
from marketplace.schemas.review import ReviewRead, ReviewSubmit, ReviewSubmitResult

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def latest_per_customer(reviews: list[Review]) -> list[Review]:
    """
    Keep only the first review seen per customer.

    `reviews` must already be sorted newest first, so the survivor for
    each customer is their most recent submission. Order is preserved.
    """
    seen: set[str] = set()
    effective: list[Review] = []
    for r in reviews:
        if r.customer_id in seen:
            continue
        seen.add(r.customer_id)
        effective.append(r)
    return effective


def mean_rating(reviews: list[Review]) -> float:
    """Arithmetic mean of ratings, 0 for an empty list."""
    if not reviews:
        return 0.0
    return sum(r.rating or 0 for r in reviews) / len(reviews)


class ReviewService:
    """
    Business logic for product reviews.

    Responsibilities:
      - one effective review per (product, customer): resubmitting
        overwrites instead of appending
      - keep Product.rating equal to the mean of effective reviews,
        recomputed from the full set on every write
    """

    def __init__(self, review_repo: ReviewRepository, product_repo: ProductRepository):
        self.review_repo = review_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    @staticmethod
    def _validate(payload: ReviewSubmit) -> tuple[int, str]:
        rating = payload.rating
        if (
            rating is None
            or not MIN_RATING <= rating <= MAX_RATING
            or rating != int(rating)
        ):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Rating must be between {MIN_RATING} and {MAX_RATING}",
            )

        customer_id = (payload.customer_id or "").strip()
        if not customer_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="customerId is required",
            )
        return int(rating), customer_id

    def _effective_reviews(self, session: Session, product_id: str) -> list[Review]:
        return latest_per_customer(self.review_repo.list_for_product(session, product_id))

    # ---- public operations ----

    def list_reviews(self, session: Session, product_id: str) -> list[Review]:
        """
        Latest review per customer, newest first.
        """
        return self._effective_reviews(session, product_id)

    def recompute_rating(self, session: Session, product_id: str) -> float:
        """
        Recompute the product's mean rating and store it on the product.

        A missing product is not an error: the mean is still returned.
        """
        avg = mean_rating(self._effective_reviews(session, product_id))
        if not self.product_repo.set_rating(session, product_id, avg):
            logger.warning("Rating for missing product %s not stored", product_id)
        session.commit()
        return avg

    def submit_review(
        self,
        session: Session,
        product_id: str,
        payload: ReviewSubmit,
    ) -> tuple[ReviewSubmitResult, bool]:
        """
        Create or update the customer's review, then refresh Product.rating.

        Steps:
          1. Validate rating in [1, 5] and customer_id present (no writes
             on failure).
          2. Update the customer's latest existing review, or create one.
          3. Recompute the mean over the latest review per customer and
             store it on the product.

        Returns:
            (result, created) where created is False for an update.
        """
        rating, customer_id = self._validate(payload)
        now = datetime.now(timezone.utc)

        existing = self.review_repo.get_latest_for_customer(session, product_id, customer_id)
        created = existing is None

        if existing:
            existing.rating = rating
            existing.comment = payload.comment
            existing.customer_name = payload.customer_name or existing.customer_name
            existing.date = now
            review = self.review_repo.save(session, existing)
        else:
            review = self.review_repo.save(
                session,
                Review(
                    id=generate_id("r"),
                    product_id=product_id,
                    customer_id=customer_id,
                    customer_name=payload.customer_name,
                    rating=rating,
                    comment=payload.comment,
                    date=now,
                ),
            )

        avg = self.recompute_rating(session, product_id)
        logger.info(
            "Review %s %s for product %s, rating now %.2f",
            review.id,
            "created" if created else "updated",
            product_id,
            avg,
        )

        result = ReviewSubmitResult(
            review=ReviewRead.model_validate(review),
            avg_rating=avg,
        )
        return result, created
