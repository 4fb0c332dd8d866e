# vegist/services/coupon_service.py
import logging

from sqlmodel import Session

from vegist.core.errors import (
    AlreadyUsed,
    InvalidCoupon,
    QuotaError,
    RemoteError,
    ValidationError,
)
from vegist.models.subscriber import Subscriber
from vegist.repositories.storage_repo import KeyValueStore
from vegist.repositories.subscriber_repo import SubscriberRepository
from vegist.schemas.checkout import CouponEligibility
from vegist.schemas.subscriber import SubscriberStatus
from vegist.services.checkout_validation import is_valid_email

logger = logging.getLogger(__name__)

HOUSE_COUPON_CODE = "VEGIST20"
HOUSE_COUPON_PERCENT = 20.0
SUBSCRIBER_EMAIL_KEY = "subscriberEmail"


def discount_amount(subtotal: float, coupon: CouponEligibility | None) -> float:
    """
    Money taken off the subtotal.

    Percentage coupons take `subtotal * value / 100`; fixed coupons take the
    value, never more than the subtotal.
    """
    if coupon is None or subtotal <= 0:
        return 0.0
    if coupon.discount_type == "percentage":
        return subtotal * coupon.discount_value / 100
    return min(coupon.discount_value, subtotal)


def _describe(discount_type: str, value: float) -> str:
    if discount_type == "percentage":
        return f"{value:g}% discount"
    return f"{value:.2f} off"


class CouponService:
    """
    Subscriber coupons.

    Checking and redeeming are separate steps:
      - check_coupon never writes
      - redeem_coupon flips the used flag with one conditional UPDATE
    """

    def __init__(self, repo: SubscriberRepository):
        self.repo = repo

    def check_coupon(self, session: Session, email: str, code: str) -> CouponEligibility:
        """
        Raises:
            InvalidCoupon: bad email, empty code, no subscriber or code mismatch
            AlreadyUsed: the subscriber's coupon was redeemed before
        """
        email = (email or "").strip()
        code = (code or "").strip()

        if not is_valid_email(email):
            raise InvalidCoupon("Please enter a valid email address to use coupon")
        if not code:
            raise InvalidCoupon()

        sub = self.repo.get_by_email(session, email)
        if sub is None or sub.coupon_code != code:
            raise InvalidCoupon()
        if sub.coupon_used:
            raise AlreadyUsed()

        return CouponEligibility(
            email=sub.email,
            code=sub.coupon_code,
            discount_type=sub.discount_type,
            discount_value=sub.discount_value,
            message=f"Coupon is valid: {_describe(sub.discount_type, sub.discount_value)}.",
        )

    def redeem_coupon(self, session: Session, email: str, code: str) -> CouponEligibility:
        """
        Mark the coupon used in the current transaction; the caller commits
        it together with the order.

        Raises:
            AlreadyUsed: another redemption won the race
        """
        eligibility = self.check_coupon(session, email, code)

        if not self.repo.mark_coupon_used(session, eligibility.email, eligibility.code):
            raise AlreadyUsed()

        logger.info("Coupon %s redeemed by %s", eligibility.code, eligibility.email)
        return eligibility.model_copy(
            update={
                "message": "Coupon applied successfully! "
                f"{_describe(eligibility.discount_type, eligibility.discount_value)} applied."
            }
        )

    # ---- newsletter ----

    def _status(self, sub: Subscriber, created: bool) -> SubscriberStatus:
        if sub.coupon_used:
            message = "Already Subscribed. Stay tuned for our latest deals and offers!"
        else:
            offer = _describe(sub.discount_type, sub.discount_value)
            message = (
                f"Thank you! Use code {sub.coupon_code} for {offer} on your first "
                "purchase. It can be used only once."
            )
        return SubscriberStatus(
            email=sub.email,
            created=created,
            coupon_used=sub.coupon_used,
            coupon_code=None if sub.coupon_used else sub.coupon_code,
            discount_value=sub.discount_value,
            message=message,
        )

    def _remember(self, storage: KeyValueStore | None, email: str) -> None:
        if storage is None:
            return
        try:
            storage.set(SUBSCRIBER_EMAIL_KEY, email)
        except (QuotaError, RemoteError) as e:
            logger.error("Subscriber email not saved: %s", e.detail)

    def subscribe(
        self,
        session: Session,
        email: str,
        storage: KeyValueStore | None = None,
    ) -> SubscriberStatus:
        """
        Subscribe an email and hand out the house coupon.

        An existing subscriber is reported as is (no second coupon).
        """
        email = email.strip()
        if not is_valid_email(email):
            raise ValidationError({"email": "Please enter a valid email address"})

        existing = self.repo.get_by_email(session, email)
        if existing is not None:
            self._remember(storage, email)
            return self._status(existing, created=False)

        sub = self.repo.create(
            session,
            Subscriber(
                email=email,
                coupon_code=HOUSE_COUPON_CODE,
                discount_type="percentage",
                discount_value=HOUSE_COUPON_PERCENT,
            ),
        )
        logger.info("New subscriber %s", email)
        self._remember(storage, email)
        return self._status(sub, created=True)

    def remembered_status(
        self,
        session: Session,
        storage: KeyValueStore,
    ) -> SubscriberStatus | None:
        """Subscription of the email this client subscribed with, if any."""
        try:
            email = storage.get(SUBSCRIBER_EMAIL_KEY)
            if not email:
                return None
            sub = self.repo.get_by_email(session, email)
        except RemoteError as e:
            logger.error("Error checking subscription: %s", e.detail)
            return None
        return self._status(sub, created=False) if sub else None
