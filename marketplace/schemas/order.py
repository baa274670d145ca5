# marketplace/schemas/order.py
from datetime import datetime, timezone
from typing import Literal

from pydantic import Field, field_validator

from marketplace.schemas.base import ApiModel

OrderStatus = Literal[
    "Pending",
    "Confirmed",
    "Being Prepared",
    "Shipped",
    "Delivered",
    "Cancelled",
]


class OrderItemIn(ApiModel):
    """
    One submitted line.

    product_id / quantity may be missing: such lines are stored on the
    order but skipped by stock and revenue updates.
    """

    product_id: str | None = None
    product_name: str | None = None
    quantity: int | None = Field(default=None, ge=0)
    price: float = Field(default=0.0, ge=0)


class OrderCreate(ApiModel):
    """
    Payload for placing an order.

    Backend derives:
      - customer_id from the path
      - id
      - total from items when not supplied
    """

    items: list[OrderItemIn] = Field(default_factory=list)
    total: float | None = None
    status: OrderStatus = "Pending"
    date: datetime | None = None
    shipping_address: str | None = None
    customer_name: str | None = None
    payment_method: str | None = None

    @field_validator("customer_name", "shipping_address", "payment_method")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None

    @field_validator("date")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        # Storefront sends ISO timestamps without an offset; they are UTC.
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class OrderItemRead(ApiModel):
    product_id: str | None = None
    product_name: str | None = None
    quantity: int | None = None
    price: float
    seller_id: str | None = None
    item_status: str


class OrderRead(ApiModel):
    """
    Full order view including items.
    """

    id: str
    customer_id: str
    customer_name: str
    items: list[OrderItemRead]
    total: float
    status: str
    date: datetime
    shipping_address: str
    payment_method: str
