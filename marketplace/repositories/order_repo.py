# marketplace/repositories/order_repo.py
from sqlmodel import Session, select

from marketplace.models.order import Order, OrderItem


class OrderRepository:
    """
    Data access layer for orders and order_items.

    NOTE:
      - No commits here; checkout is a multi-step workflow.
        The service is responsible for calling session.commit().
    """

    # ---- Orders ----

    def list_for_customer(
        self,
        session: Session,
        customer_id: str,
        skip: int = 0,
        limit: int | None = 100,
    ) -> list[Order]:
        """
        Orders for one customer, newest first. `limit=None` returns all.
        """
        stmt = (
            select(Order)
            .where(Order.customer_id == customer_id)
            .order_by(Order.date.desc())
            .offset(skip)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return session.exec(stmt).all()

    def create_order(
        self,
        session: Session,
        order: Order,
        items: list[OrderItem],
    ) -> tuple[Order, list[OrderItem]]:
        """
        Insert an Order and its items without committing.
        """
        session.add(order)
        session.flush()
        for item in items:
            item.order_id = order.id
        session.add_all(items)
        session.flush()
        return order, items

    # ---- Order items ----

    def list_items_for_order(self, session: Session, order_id: str) -> list[OrderItem]:
        stmt = (
            select(OrderItem)
            .where(OrderItem.order_id == order_id)
            .order_by(OrderItem.position)
        )
        return session.exec(stmt).all()

    def list_items_for_orders(
        self,
        session: Session,
        order_ids: list[str],
    ) -> list[OrderItem]:
        if not order_ids:
            return []
        stmt = (
            select(OrderItem)
            .where(OrderItem.order_id.in_(order_ids))
            .order_by(OrderItem.order_id, OrderItem.position)
        )
        return session.exec(stmt).all()
