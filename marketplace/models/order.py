# marketplace/models/order.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order, created once per checkout.

    Only status fields change after creation (seller dashboard, not here).
    """

    __tablename__ = "orders"

    id: str = Field(primary_key=True, index=True)

    customer_id: str = Field(index=True)
    customer_name: str = Field(default="Unknown")

    total: float = Field(description="Order total as submitted by the client")

    # Pending | Confirmed | Being Prepared | Shipped | Delivered | Cancelled
    status: str = Field(default="Pending", index=True)

    date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
    )

    shipping_address: str = Field(default="")
    payment_method: str = Field(default="Cash on Delivery")


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order.

    product_id is not a FK: the order keeps the line even if the
    product is deleted later (or was already gone at checkout).
    """

    __tablename__ = "order_items"

    id: int | None = Field(default=None, primary_key=True)

    order_id: str = Field(foreign_key="orders.id", index=True)

    # Position of the item in the submitted list
    position: int = Field(default=0)

    product_id: str | None = Field(default=None, index=True)
    product_name: str | None = None

    quantity: int | None = None

    # Unit price at time of order
    price: float = Field(default=0.0)

    seller_id: str | None = Field(default=None, index=True)
    item_status: str = Field(default="Pending")
