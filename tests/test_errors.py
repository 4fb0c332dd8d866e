import pytest
from sqlalchemy.exc import OperationalError

from vegist.core.errors import (
    AlreadyUsed,
    InvalidCoupon,
    NotFoundError,
    QuotaError,
    RemoteError,
    SessionError,
    ValidationError,
    remote_errors,
)


@pytest.mark.parametrize(
    "error,status_code",
    [
        (ValidationError({"email": "Email is required"}), 422),
        (NotFoundError(), 404),
        (RemoteError(), 502),
        (QuotaError(), 507),
        (InvalidCoupon(), 400),
        (AlreadyUsed(), 400),
        (SessionError(), 401),
    ],
)
def test_error_status_codes(error, status_code):
    assert error.status_code == status_code


def test_validation_error_drops_empty_messages():
    err = ValidationError(
        {"email": "Email is required", "city": ""},
        "Please fix the highlighted fields",
    )
    assert err.errors == {"email": "Email is required"}
    assert err.detail["message"] == "Please fix the highlighted fields"


class RecordingSession:
    rolled_back = False

    def rollback(self):
        self.rolled_back = True


def test_remote_errors_translates_and_rolls_back():
    session = RecordingSession()
    with pytest.raises(RemoteError) as exc:
        with remote_errors("Order insert", session):
            raise OperationalError("INSERT", {}, Exception("db down"))

    assert exc.value.detail == "Order insert failed: OperationalError"
    assert session.rolled_back is True
