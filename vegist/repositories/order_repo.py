# vegist/repositories/order_repo.py
import uuid

from sqlmodel import Session, select

from vegist.core.errors import remote_errors
from vegist.models.order import Order, OrderItem


class OrderRepository:
    """
    Data access layer for orders and order_items.

    NOTE:
      - An order and its lines are written in one transaction.
    """

    def create_with_items(
        self,
        session: Session,
        order: Order,
        items: list[OrderItem],
    ) -> Order:
        with remote_errors("Order insert", session):
            session.add(order)
            session.flush()  # Assign PK
            for item in items:
                item.order_id = order.id
            session.add_all(items)
            session.commit()
            session.refresh(order)
        return order

    def get_for_client(
        self,
        session: Session,
        order_id: uuid.UUID,
        client_id: str,
    ) -> Order | None:
        with remote_errors("Order lookup"):
            stmt = select(Order).where(Order.id == order_id).where(Order.client_id == client_id)
            return session.exec(stmt).first()

    def list_items_for_order(self, session: Session, order_id: uuid.UUID) -> list[OrderItem]:
        with remote_errors("Order item listing"):
            stmt = select(OrderItem).where(OrderItem.order_id == order_id)
            return list(session.exec(stmt).all())
