# marketplace/routers/reviews.py
from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from marketplace.database import get_session
from marketplace.repositories.product_repo import ProductRepository
from marketplace.repositories.review_repo import ReviewRepository
from marketplace.schemas.review import ReviewRead, ReviewSubmit, ReviewSubmitResult
from marketplace.services.review_service import ReviewService

router = APIRouter(prefix="/products", tags=["Reviews"])

review_repo = ReviewRepository()
product_repo = ProductRepository()
service = ReviewService(review_repo, product_repo)


@router.get("/{product_id}/reviews", response_model=list[ReviewRead])
def list_reviews(
    product_id: str,
    session: Session = Depends(get_session),
):
    """
    Reviews for a product: one per customer (their latest), newest first.

    - Public endpoint.
    """
    return service.list_reviews(session, product_id)


@router.post(
    "/{product_id}/reviews",
    response_model=ReviewSubmitResult,
    status_code=status.HTTP_201_CREATED,
)
def submit_review(
    product_id: str,
    payload: ReviewSubmit,
    response: Response,
    session: Session = Depends(get_session),
):
    """
    Create or update the customer's review and return the new average.

    - 201 when a review was created, 200 when the customer's previous
      review was overwritten.
    - 400 if rating is not an integer in [1, 5] or customerId is missing.
    """
    result, created = service.submit_review(session, product_id, payload)
    if not created:
        response.status_code = status.HTTP_200_OK
    return result
