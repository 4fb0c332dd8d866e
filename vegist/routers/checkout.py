# vegist/routers/checkout.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from vegist.core.config import get_settings
from vegist.core.session import get_client_id, get_client_storage
from vegist.database import get_session
from vegist.repositories.order_repo import OrderRepository
from vegist.repositories.storage_repo import DatabaseStorage
from vegist.repositories.subscriber_repo import SubscriberRepository
from vegist.routers.cart import get_cart
from vegist.schemas.checkout import (
    CheckoutRequest,
    CheckoutSummary,
    CouponEligibility,
    CouponRequest,
    OrderRead,
)
from vegist.services.cart_store import CartStore
from vegist.services.checkout_service import CheckoutService
from vegist.services.coupon_service import CouponService

settings = get_settings()

router = APIRouter(prefix="/checkout", tags=["Checkout"])

coupon_service = CouponService(SubscriberRepository())
service = CheckoutService(
    OrderRepository(),
    coupon_service,
    free_shipping_threshold=settings.FREE_SHIPPING_THRESHOLD,
    shipping_fee=settings.SHIPPING_FEE,
)


@router.get("/summary", response_model=CheckoutSummary)
def checkout_summary(
    email: str | None = None,
    coupon_code: str | None = None,
    session: Session = Depends(get_session),
    cart: CartStore = Depends(get_cart),
):
    """
    Order summary for the cart.

    - With `email` + `coupon_code` the coupon is checked (not redeemed) and
      its discount included.
    """
    return service.preview(session, cart, email, coupon_code)


@router.post("/coupon", response_model=CouponEligibility)
def check_coupon(payload: CouponRequest, session: Session = Depends(get_session)):
    """
    Check a coupon without using it.

    - 400 with "Invalid coupon code or email" or "This coupon has already been used".
    """
    return coupon_service.check_coupon(session, payload.email, payload.code)


@router.post("", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
def place_order(
    payload: CheckoutRequest,
    session: Session = Depends(get_session),
    client_id: str = Depends(get_client_id),
    storage: DatabaseStorage = Depends(get_client_storage),
):
    """
    Place an order from the cart, or from `items` for a "buy now" checkout.

    - 422 lists every invalid field.
    - The coupon (if any) is redeemed; the cart is emptied.
    """
    return service.place_order(session, storage, client_id, payload)


@router.get("/orders/{order_id}", response_model=OrderRead)
def get_order(
    order_id: str,
    session: Session = Depends(get_session),
    client_id: str = Depends(get_client_id),
):
    return service.get_order(session, client_id, order_id)
