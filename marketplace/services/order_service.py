# marketplace/services/order_service.py
import logging
from collections import defaultdict
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from marketplace.core.ids import generate_id
from marketplace.models.order import Order, OrderItem
from marketplace.models.product import Product
from marketplace.repositories.cart_repo import CartRepository
from marketplace.repositories.order_repo import OrderRepository
from marketplace.repositories.product_repo import ProductRepository
from marketplace.repositories.seller_repo import SellerRepository
from marketplace.schemas.order import OrderCreate, OrderItemRead, OrderRead

logger = logging.getLogger(__name__)

DEFAULT_CUSTOMER_NAME = "Unknown"
DEFAULT_PAYMENT_METHOD = "Cash on Delivery"


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create the order record from the submitted items
      - Deduct product stock (floored at 0, never rejected for overselling)
      - Add each seller's share of the order to Seller.total_sales
      - Delete the customer's cart

    Two checkout modes:
      - lenient (default): each step commits on its own. Lines whose
        product is gone, or whose stock update fails, are logged and
        skipped; completed steps are never rolled back.
      - strict: one transaction for the whole checkout. A missing product
        or seller aborts with 409 before anything is written.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        seller_repo: SellerRepository,
        cart_repo: CartRepository,
    ):
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.seller_repo = seller_repo
        self.cart_repo = cart_repo

    # -------- User-facing operations --------

    def place_order(
        self,
        session: Session,
        user_id: str,
        payload: OrderCreate,
        strict: bool = False,
    ) -> OrderRead:
        """
        Place an order for `user_id`.

        Steps:
          1. Reject an empty item list (400, nothing written).
          2. Create the Order + OrderItem rows.
          3. For each line with a product id and quantity whose product
             exists: stock = max(0, stock - quantity), and accumulate
             price * quantity for the product's seller.
          4. Add the accumulated revenue to each seller's total_sales.
          5. Delete the user's cart.
        """
        if not payload.items:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Order must contain at least one item",
            )

        product_ids = [it.product_id for it in payload.items if it.product_id]
        products = {
            p.id: p for p in self.product_repo.list_by_ids(session, list(set(product_ids)))
        }

        if strict:
            self._check_references(session, payload, products)

        order, items = self._build_order(user_id, payload, products)

        if strict:
            return self._place_strict(session, user_id, order, items)
        return self._place_lenient(session, user_id, order, items)

    def list_customer_orders(
        self,
        session: Session,
        customer_id: str,
        skip: int = 0,
        limit: int | None = 100,
    ) -> list[OrderRead]:
        """
        List orders for the given customer, newest first, with items.
        Pass limit=None for the full history.
        """
        orders = self.order_repo.list_for_customer(session, customer_id, skip, limit)
        items = self.order_repo.list_items_for_orders(session, [o.id for o in orders])

        by_order: dict[str, list[OrderItem]] = defaultdict(list)
        for it in items:
            by_order[it.order_id].append(it)

        return [self._build_order_dto(o, by_order[o.id]) for o in orders]

    # -------- Checkout steps --------

    def _place_lenient(
        self,
        session: Session,
        user_id: str,
        order: Order,
        items: list[OrderItem],
    ) -> OrderRead:
        # Order creation failing is fatal: nothing else runs.
        self.order_repo.create_order(session, order, items)
        session.commit()
        logger.info("Order %s created for %s (%d items)", order.id, user_id, len(items))

        revenue: dict[str, float] = defaultdict(float)
        for item in items:
            if not item.product_id or not item.quantity:
                continue

            try:
                product = self.product_repo.get_by_id(session, item.product_id)
                if product is None:
                    logger.warning(
                        "Order %s: product %s no longer exists, stock not updated",
                        order.id,
                        item.product_id,
                    )
                    continue
                seller_id = product.seller_id
                new_stock = self.product_repo.decrement_stock(
                    session, item.product_id, item.quantity
                )
                session.commit()
            except SQLAlchemyError:
                session.rollback()
                logger.exception(
                    "Order %s: stock update failed for product %s, skipping",
                    order.id,
                    item.product_id,
                )
                continue

            if new_stock is None:
                logger.warning(
                    "Order %s: product %s vanished before its stock update, skipping",
                    order.id,
                    item.product_id,
                )
                continue

            logger.info(
                "Stock for product %s: -%d -> %s", item.product_id, item.quantity, new_stock
            )
            if seller_id:
                revenue[seller_id] += item.price * item.quantity

        for seller_id, amount in revenue.items():
            try:
                found = self.seller_repo.add_to_total_sales(session, seller_id, amount)
                session.commit()
            except SQLAlchemyError:
                session.rollback()
                logger.exception(
                    "Order %s: total_sales update failed for seller %s, skipping",
                    order.id,
                    seller_id,
                )
                continue
            if not found:
                logger.warning("Order %s: seller %s not found, sales not recorded", order.id, seller_id)

        self.cart_repo.delete_cart(session, user_id)
        session.commit()

        return self._build_order_dto(order, self.order_repo.list_items_for_order(session, order.id))

    def _place_strict(
        self,
        session: Session,
        user_id: str,
        order: Order,
        items: list[OrderItem],
    ) -> OrderRead:
        try:
            self.order_repo.create_order(session, order, items)

            revenue: dict[str, float] = defaultdict(float)
            for item in items:
                if not item.product_id or not item.quantity:
                    continue
                new_stock = self.product_repo.decrement_stock(
                    session, item.product_id, item.quantity
                )
                if new_stock is None:
                    raise self._conflict(item.product_id, "Product not found")
                if item.seller_id:
                    revenue[item.seller_id] += item.price * item.quantity

            for seller_id, amount in revenue.items():
                if not self.seller_repo.add_to_total_sales(session, seller_id, amount):
                    raise self._conflict(
                        next(it.product_id for it in items if it.seller_id == seller_id),
                        f"Seller {seller_id} not found",
                    )

            self.cart_repo.delete_cart(session, user_id)
            session.commit()
        except (HTTPException, SQLAlchemyError):
            session.rollback()
            raise

        logger.info("Order %s placed for %s (strict)", order.id, user_id)
        return self._build_order_dto(order, self.order_repo.list_items_for_order(session, order.id))

    def _check_references(
        self,
        session: Session,
        payload: OrderCreate,
        products: dict[str, Product],
    ) -> None:
        """
        Strict mode only: every line must name an existing product, and
        every product's seller must exist.
        """
        errors: list[dict[str, str]] = []

        for it in payload.items:
            if not it.product_id or not it.quantity:
                continue
            product = products.get(it.product_id)
            if product is None:
                errors.append({"productId": it.product_id, "reason": "Product not found"})
                continue
            if product.seller_id and self.seller_repo.get_by_id(session, product.seller_id) is None:
                errors.append(
                    {
                        "productId": it.product_id,
                        "reason": f"Seller {product.seller_id} not found",
                    }
                )

        if errors:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={"message": "Order references missing records", "items": errors},
            )

    @staticmethod
    def _conflict(product_id: str, reason: str) -> HTTPException:
        # A record removed between the reference check and the write.
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": "Order references missing records",
                "items": [{"productId": product_id, "reason": reason}],
            },
        )

    # -------- Helpers --------

    def _build_order(
        self,
        user_id: str,
        payload: OrderCreate,
        products: dict[str, Product],
    ) -> tuple[Order, list[OrderItem]]:
        """
        Turn the payload into unsaved Order/OrderItem rows.

        Lines keep the submitted price. Name and seller come from the
        product when it still exists.
        """
        items: list[OrderItem] = []
        computed_total = 0.0

        for position, it in enumerate(payload.items):
            product = products.get(it.product_id) if it.product_id else None
            computed_total += it.price * (it.quantity or 0)
            items.append(
                OrderItem(
                    order_id="",
                    position=position,
                    product_id=it.product_id,
                    product_name=it.product_name or (product.name if product else None),
                    quantity=it.quantity,
                    price=it.price,
                    seller_id=product.seller_id if product else None,
                    item_status="Pending",
                )
            )

        order = Order(
            id=generate_id("o"),
            customer_id=user_id,
            customer_name=payload.customer_name or DEFAULT_CUSTOMER_NAME,
            total=payload.total if payload.total is not None else computed_total,
            status=payload.status,
            date=payload.date or datetime.now(timezone.utc),
            shipping_address=payload.shipping_address or "",
            payment_method=payload.payment_method or DEFAULT_PAYMENT_METHOD,
        )
        return order, items

    def _build_order_dto(self, order: Order, items: list[OrderItem]) -> OrderRead:
        """
        Compose OrderRead from ORM rows.
        """
        return OrderRead(
            id=order.id,
            customer_id=order.customer_id,
            customer_name=order.customer_name,
            items=[
                OrderItemRead(
                    product_id=it.product_id,
                    product_name=it.product_name,
                    quantity=it.quantity,
                    price=it.price,
                    seller_id=it.seller_id,
                    item_status=it.item_status,
                )
                for it in items
            ],
            total=order.total,
            status=order.status,
            date=order.date,
            shipping_address=order.shipping_address,
            payment_method=order.payment_method,
        )
