# marketplace/models/review.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Review(SQLModel, table=True):
    """
    Customer review of a product.

    There is deliberately no unique constraint on (product_id, customer_id):
    older data may hold several rows for the same pair. Only the most
    recent one (by date) counts.
    """

    __tablename__ = "reviews"

    id: str = Field(primary_key=True, index=True)

    product_id: str = Field(index=True)
    customer_id: str = Field(index=True)
    customer_name: str | None = None

    rating: int = Field(ge=1, le=5)
    comment: str | None = None

    date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
        description="Last submission time (UTC)",
    )
