# vegist/schemas/checkout.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from vegist.schemas.cart import CartItemCreate, CartLineRead
from vegist.schemas.product import as_utc

DiscountType = Literal["percentage", "fixed"]
PaymentMethod = Literal["esewa", "khalti", "cod"]


class CouponRequest(SQLModel):
    """
    Coupon check / redeem payload.

    The email is checked by the coupon service (not EmailStr) so a bad
    address is reported as an invalid coupon, like any other mismatch.
    """

    model_config = ConfigDict(extra="forbid")

    email: str
    code: str

    @field_validator("email", "code")
    @classmethod
    def strip(cls, v: str) -> str:
        return v.strip()


class CouponEligibility(SQLModel):
    """
    Discount descriptor for a coupon that can be (or just was) redeemed.
    """

    email: str
    code: str
    discount_type: DiscountType
    discount_value: float
    message: str = ""


class CheckoutRequest(SQLModel):
    """
    Checkout form submission.

    Field rules are applied by the checkout validator so every message is
    returned at once; pydantic only guards the shape.

    `items` is used for "buy now" checkouts (a single line outside the cart);
    when omitted the client's cart is checked out.
    """

    model_config = ConfigDict(extra="forbid")

    payment_method: PaymentMethod = "esewa"

    email: str = ""
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    city: str = ""
    area: str | None = None

    esewa_id: str = ""
    esewa_password: str = ""
    khalti_number: str = ""
    khalti_mpin: str = ""

    coupon_code: str | None = None
    items: list[CartItemCreate] | None = None

    @field_validator("coupon_code", "area")
    @classmethod
    def blank_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class CheckoutSummary(SQLModel):
    """
    Order summary shown next to the checkout form.
    """

    items: list[CartLineRead]
    item_count: int
    subtotal: float
    shipping_fee: float
    discount_amount: float = 0
    total: float
    amount_to_free_shipping: float
    free_shipping_progress: float
    coupon: CouponEligibility | None = None


class OrderItemRead(SQLModel):
    product_id: str
    product_name: str
    selected_package: str | None
    quantity: int
    unit_price: float
    discount_percentage: float
    line_total: float


class OrderRead(SQLModel):
    """
    Placed order with its lines.
    """

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    address: str
    city: str
    area: str | None
    payment_method: str
    coupon_code: str | None
    subtotal: float
    shipping_fee: float
    discount_amount: float
    total_amount: float
    status: str
    created_at: datetime
    items: list[OrderItemRead] = Field(default_factory=list)

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        return as_utc(v)
