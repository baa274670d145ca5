# marketplace/models/cart.py
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Cart(SQLModel, table=True):
    """
    Shopping cart header. One row per user.

    The row is deleted (not emptied) on checkout or explicit clear.
    """

    __tablename__ = "carts"

    user_id: str = Field(primary_key=True, index=True)

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class CartItem(SQLModel, table=True):
    """
    Shopping cart entry.
    One cart cannot have 2 rows for the same product.

    name/price/image/seller_name/stock are snapshots taken by the
    storefront when the item was added.
    """

    __tablename__ = "cart_items"
    __table_args__ = (UniqueConstraint("user_id", "product_id", name="uq_cart_items_user_product"),)

    id: int | None = Field(default=None, primary_key=True)

    user_id: str = Field(foreign_key="carts.user_id", index=True)

    product_id: str = Field(index=True)

    name: str | None = None
    price: float = Field(default=0.0)
    image: str | None = None
    seller_name: str | None = None

    quantity: int = Field(default=1)

    stock: int | None = Field(
        default=None,
        description="Stock snapshot when added; caps merged quantities",
    )
