import pytest

from vegist.core.errors import AlreadyUsed, InvalidCoupon, ValidationError
from vegist.models.subscriber import Subscriber
from vegist.repositories.subscriber_repo import SubscriberRepository
from vegist.schemas.checkout import CouponEligibility
from vegist.services.coupon_service import (
    HOUSE_COUPON_CODE,
    SUBSCRIBER_EMAIL_KEY,
    CouponService,
    discount_amount,
)

EMAIL = "shopper@example.com"


@pytest.fixture
def service():
    return CouponService(SubscriberRepository())


@pytest.fixture
def subscriber(session):
    sub = Subscriber(email=EMAIL, coupon_code=HOUSE_COUPON_CODE, discount_value=20)
    session.add(sub)
    session.commit()
    return sub


def test_check_does_not_consume_coupon(service, session, subscriber):
    first = service.check_coupon(session, EMAIL, HOUSE_COUPON_CODE)
    second = service.check_coupon(session, f"  {EMAIL} ", HOUSE_COUPON_CODE)

    assert first.discount_value == 20
    assert second.code == HOUSE_COUPON_CODE
    assert SubscriberRepository().get_by_email(session, EMAIL).coupon_used is False


def test_redeem_succeeds_once(service, session, subscriber):
    applied = service.redeem_coupon(session, EMAIL, HOUSE_COUPON_CODE)
    assert applied.message == "Coupon applied successfully! 20% discount applied."

    with pytest.raises(AlreadyUsed):
        service.redeem_coupon(session, EMAIL, HOUSE_COUPON_CODE)
    with pytest.raises(AlreadyUsed):
        service.check_coupon(session, EMAIL, HOUSE_COUPON_CODE)

    stored = SubscriberRepository().get_by_email(session, EMAIL)
    assert stored.coupon_used is True
    assert stored.coupon_used_at is not None


def test_conditional_update_only_flips_once(session, subscriber):
    repo = SubscriberRepository()
    assert repo.mark_coupon_used(session, EMAIL, HOUSE_COUPON_CODE) is True
    assert repo.mark_coupon_used(session, EMAIL, HOUSE_COUPON_CODE) is False


@pytest.mark.parametrize(
    "email,code",
    [
        (EMAIL, "WRONG"),
        (EMAIL, ""),
        ("nobody@example.com", HOUSE_COUPON_CODE),
    ],
)
def test_invalid_coupon(service, session, subscriber, email, code):
    with pytest.raises(InvalidCoupon):
        service.check_coupon(session, email, code)


def test_bad_email_is_rejected_before_lookup(service, session, subscriber):
    with pytest.raises(InvalidCoupon) as exc:
        service.check_coupon(session, "not-an-email", HOUSE_COUPON_CODE)
    assert exc.value.detail == "Please enter a valid email address to use coupon"


def test_subscribe_hands_out_house_coupon(service, session, storage):
    status = service.subscribe(session, "new@example.com", storage)

    assert status.created is True
    assert status.coupon_code == HOUSE_COUPON_CODE
    assert "VEGIST20" in status.message
    assert storage.data[SUBSCRIBER_EMAIL_KEY] == "new@example.com"

    remembered = service.remembered_status(session, storage)
    assert remembered.email == "new@example.com"


def test_subscribing_twice_reports_existing(service, session, subscriber):
    service.redeem_coupon(session, EMAIL, HOUSE_COUPON_CODE)

    status = service.subscribe(session, EMAIL)

    assert status.created is False
    assert status.coupon_used is True
    assert status.coupon_code is None
    assert status.message.startswith("Already Subscribed")


def test_subscribe_rejects_bad_email(service, session):
    with pytest.raises(ValidationError) as exc:
        service.subscribe(session, "nope")
    assert exc.value.errors == {"email": "Please enter a valid email address"}


def test_remembered_status_without_email(service, session, storage):
    assert service.remembered_status(session, storage) is None


def test_discount_amount():
    percent = CouponEligibility(
        email=EMAIL, code="X", discount_type="percentage", discount_value=20, message=""
    )
    fixed = CouponEligibility(
        email=EMAIL, code="X", discount_type="fixed", discount_value=15, message=""
    )

    assert discount_amount(80, percent) == pytest.approx(16)
    assert discount_amount(80, fixed) == 15
    assert discount_amount(10, fixed) == 10
    assert discount_amount(80, None) == 0


def test_redemption_is_undone_by_rollback(service, session, subscriber):
    service.redeem_coupon(session, EMAIL, HOUSE_COUPON_CODE)
    session.rollback()

    assert service.check_coupon(session, EMAIL, HOUSE_COUPON_CODE).code == HOUSE_COUPON_CODE
