# marketplace/models/product.py
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    - seller_id is a plain reference (no FK): products outlive sellers
      and orders must tolerate either side disappearing.
    - rating is derived from reviews; only the review aggregator writes it.
    """

    __tablename__ = "products"

    id: str = Field(primary_key=True, index=True)

    name: str = Field(index=True)

    price: float = Field(
        default=0.0,
        ge=0,
        description="Unit price",
    )

    category: str | None = Field(default=None, index=True)

    seller_id: str | None = Field(
        default=None,
        index=True,
        description="Owning seller id (reference only)",
    )

    stock: int = Field(
        default=0,
        ge=0,
        description="Units currently in stock, never negative",
    )

    rating: float = Field(
        default=0.0,
        description="Mean of the latest review per customer",
    )

    description: str | None = None
    image: str | None = None
