# vegist/models/order.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Submitted checkout.

    Payment gateways are not called; orders are recorded as 'pending'
    with the totals the customer saw.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    client_id: str = Field(
        index=True,
        description="Anonymous storefront session that placed the order",
    )

    email: str
    first_name: str
    last_name: str
    address: str
    city: str
    area: str | None = None

    # esewa | khalti | cod
    payment_method: str

    coupon_code: str | None = None

    subtotal: float
    shipping_fee: float
    discount_amount: float = Field(default=0)
    total_amount: float

    status: str = Field(default="pending", index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order, snapshotted from the cart line.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: str = Field(index=True)
    product_name: str
    selected_package: str | None = None

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    unit_price: float = Field(description="Unit price before discount")
    discount_percentage: float = Field(default=0)
    line_total: float
