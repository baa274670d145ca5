# marketplace/models/seller.py
from sqlmodel import SQLModel, Field


class Seller(SQLModel, table=True):
    """
    Seller profile.

    total_sales is a running revenue total, incremented only by order
    placement.
    """

    __tablename__ = "sellers"

    id: str = Field(primary_key=True, index=True)

    name: str | None = None
    type: str | None = None
    description: str | None = None
    location: str | None = None
    image: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None

    rating: float | None = None

    total_sales: float = Field(
        default=0.0,
        description="Accumulated revenue from placed orders",
    )
