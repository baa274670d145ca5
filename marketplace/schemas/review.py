# marketplace/schemas/review.py
from datetime import datetime

from marketplace.schemas.base import ApiModel


class ReviewSubmit(ApiModel):
    """
    Payload for creating or updating the caller's review of a product.

    rating and customer_id are deliberately loose here: range and presence
    are checked by the service so failures come back as 400, before any
    write.
    """

    rating: float | None = None
    comment: str | None = None
    customer_id: str | None = None
    customer_name: str | None = None


class ReviewRead(ApiModel):
    id: str
    product_id: str
    customer_id: str
    customer_name: str | None = None
    rating: int
    comment: str | None = None
    date: datetime


class ReviewSubmitResult(ApiModel):
    """
    Saved review plus the product's freshly recomputed average.
    """

    review: ReviewRead
    avg_rating: float
