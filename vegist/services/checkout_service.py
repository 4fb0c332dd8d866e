# vegist/services/checkout_service.py
import logging
import uuid

from sqlmodel import Session

from vegist.core.errors import NotFoundError, RemoteError, ValidationError
from vegist.models.order import Order, OrderItem
from vegist.repositories.order_repo import OrderRepository
from vegist.repositories.storage_repo import KeyValueStore
from vegist.schemas.cart import CartLineItem, CartLineRead
from vegist.schemas.checkout import (
    CheckoutRequest,
    CheckoutSummary,
    CouponEligibility,
    OrderItemRead,
    OrderRead,
)
from vegist.services import pricing
from vegist.services.cart_store import CartStore
from vegist.services.checkout_validation import is_form_valid, validate_form
from vegist.services.coupon_service import CouponService, discount_amount

logger = logging.getLogger(__name__)


class CheckoutService:
    """
    Business logic for checkout.

    Responsibilities:
      - order summary (subtotal, shipping waiver, coupon discount, total)
      - form validation with every message reported at once
      - check then redeem the coupon, committed only with the order
      - persist the order + lines, then clear the cart
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        coupon_service: CouponService,
        free_shipping_threshold: float = pricing.FREE_SHIPPING_THRESHOLD,
        shipping_fee: float = pricing.SHIPPING_FEE,
    ):
        self.order_repo = order_repo
        self.coupon_service = coupon_service
        self.free_shipping_threshold = free_shipping_threshold
        self.shipping_fee = shipping_fee

    def summarize(
        self,
        items: list[CartLineItem],
        coupon: CouponEligibility | None = None,
    ) -> CheckoutSummary:
        subtotal = pricing.cart_subtotal(items)
        shipping = pricing.shipping_fee(subtotal, self.free_shipping_threshold, self.shipping_fee)
        discount = discount_amount(subtotal, coupon)

        return CheckoutSummary(
            items=[
                CartLineRead(
                    **it.model_dump(),
                    effective_price=pricing.effective_price(it.price, it.discount_percentage),
                    line_total=pricing.line_total(it),
                )
                for it in items
            ],
            item_count=sum(it.quantity for it in items),
            subtotal=subtotal,
            shipping_fee=shipping,
            discount_amount=discount,
            total=pricing.order_total(subtotal, shipping, discount),
            amount_to_free_shipping=pricing.amount_to_free_shipping(
                subtotal, self.free_shipping_threshold
            ),
            free_shipping_progress=pricing.free_shipping_progress(
                subtotal, self.free_shipping_threshold
            ),
            coupon=coupon,
        )

    def preview(
        self,
        session: Session,
        cart: CartStore,
        email: str | None = None,
        coupon_code: str | None = None,
    ) -> CheckoutSummary:
        """Summary of the cart, with a coupon checked (not redeemed) if given."""
        coupon = None
        if coupon_code:
            coupon = self.coupon_service.check_coupon(session, email or "", coupon_code)
        return self.summarize(cart.items, coupon)

    def place_order(
        self,
        session: Session,
        storage: KeyValueStore,
        client_id: str,
        payload: CheckoutRequest,
    ) -> OrderRead:
        """
        Validate, redeem the coupon, store the order and empty the cart.

        Raises:
            ValidationError: empty checkout or invalid form fields
            InvalidCoupon / AlreadyUsed: the coupon cannot be applied
            RemoteError: the order could not be stored (the coupon stays unused)
        """
        cart = CartStore(storage, self.free_shipping_threshold, self.shipping_fee)
        buy_now = payload.items is not None
        items = [CartLineItem.model_validate(it.model_dump()) for it in payload.items or []]
        if not buy_now:
            items = list(cart.items)

        if not items:
            raise ValidationError({"items": "No items found"}, "Nothing to check out")

        errors = validate_form(payload.model_dump(), payload.payment_method)
        if not is_form_valid(errors):
            raise ValidationError(errors, "Please fix the highlighted fields")

        coupon = None
        if payload.coupon_code:
            coupon = self.coupon_service.redeem_coupon(
                session, payload.email, payload.coupon_code
            )

        summary = self.summarize(items, coupon)
        order = Order(
            client_id=client_id,
            email=payload.email.strip(),
            first_name=payload.first_name.strip(),
            last_name=payload.last_name.strip(),
            address=payload.address.strip(),
            city=payload.city.strip().lower(),
            area=payload.area,
            payment_method=payload.payment_method,
            coupon_code=coupon.code if coupon else None,
            subtotal=summary.subtotal,
            shipping_fee=summary.shipping_fee,
            discount_amount=summary.discount_amount,
            total_amount=summary.total,
        )
        lines = [
            OrderItem(
                product_id=line.product_id,
                product_name=line.name,
                selected_package=line.selected_package,
                quantity=line.quantity,
                unit_price=line.price,
                discount_percentage=line.discount_percentage or 0,
                line_total=line.line_total,
            )
            for line in summary.items
        ]
        try:
            order = self.order_repo.create_with_items(session, order, lines)
        except RemoteError:
            # the coupon redemption is still pending in this transaction
            session.rollback()
            raise
        logger.info(
            "Order %s placed: %d lines, total %s",
            order.id,
            len(lines),
            pricing.format_price(order.total_amount),
        )

        if not buy_now:
            cart.clear_cart()

        return self.get_order(session, client_id, order.id)

    def get_order(self, session: Session, client_id: str, order_id) -> OrderRead:
        """
        Raises:
            NotFoundError: no such order for this client
        """
        try:
            oid = uuid.UUID(str(order_id))
        except ValueError:
            raise NotFoundError("Order not found")

        order = self.order_repo.get_for_client(session, oid, client_id)
        if order is None:
            raise NotFoundError("Order not found")

        items = self.order_repo.list_items_for_order(session, order.id)
        return OrderRead(
            **order.model_dump(exclude={"client_id"}),
            items=[OrderItemRead.model_validate(it) for it in items],
        )
