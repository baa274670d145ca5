# marketplace/schemas/cart.py
from datetime import datetime

from pydantic import Field

from marketplace.schemas.base import ApiModel


class CartItemCreate(ApiModel):
    """
    Payload for adding to cart.

    name/price/image/seller_name/stock are snapshots supplied by the
    storefront from the product page.
    """

    product_id: str
    name: str | None = None
    price: float = Field(default=0.0, ge=0)
    image: str | None = None
    seller_name: str | None = None
    quantity: int = Field(default=1, gt=0)
    stock: int | None = Field(default=None, ge=0)


class CartItemUpdate(ApiModel):
    """
    Payload for updating quantity of a cart item.
    """

    quantity: int = Field(gt=0)


class CartItemRead(ApiModel):
    product_id: str
    name: str | None = None
    price: float
    image: str | None = None
    seller_name: str | None = None
    quantity: int
    stock: int | None = None


class CartRead(ApiModel):
    """
    Cart contents. An absent cart reads as an empty item list.
    """

    user_id: str
    items: list[CartItemRead]
    updated_at: datetime | None = None


class MessageRead(ApiModel):
    message: str
