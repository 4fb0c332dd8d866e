# vegist/core/errors.py
"""
Storefront error taxonomy.

Every error is an HTTPException so services can raise them at the same
places they would raise a plain HTTPException, and FastAPI renders them
without extra handlers.

  - ValidationError : user-correctable field errors (422)
  - NotFoundError   : missing product / category / order (404)
  - RemoteError     : data store failure (502); read paths degrade instead
  - QuotaError      : client storage write too large (507)
  - CouponError     : InvalidCoupon / AlreadyUsed (400)
  - SessionError    : missing or invalid client session token (401)
"""
from contextlib import contextmanager

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError


class StorefrontError(HTTPException):
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request failed"

    def __init__(self, detail=None):
        super().__init__(
            status_code=self.status_code,
            detail=detail if detail is not None else self.default_detail,
        )


class ValidationError(StorefrontError):
    status_code = status.HTTP_422_UNPROCESSABLE_CONTENT
    default_detail = "Validation failed"

    def __init__(self, errors: dict[str, str], message: str | None = None):
        self.errors = {k: v for k, v in errors.items() if v}
        super().__init__(
            {"message": message or self.default_detail, "errors": self.errors}
        )


class NotFoundError(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Item not found"


class RemoteError(StorefrontError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Data store unavailable"


class QuotaError(StorefrontError):
    status_code = status.HTTP_507_INSUFFICIENT_STORAGE
    default_detail = "Storage quota exceeded"


class CouponError(StorefrontError):
    default_detail = "Coupon cannot be applied"


class InvalidCoupon(CouponError):
    default_detail = "Invalid coupon code or email"


class AlreadyUsed(CouponError):
    default_detail = "This coupon has already been used"


class SessionError(StorefrontError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid or expired session"


@contextmanager
def remote_errors(action: str, session=None):
    """
    Translate SQLAlchemy failures inside the block into RemoteError.

    When a session is given it is rolled back first so it stays usable.
    """
    try:
        yield
    except SQLAlchemyError as e:
        if session is not None:
            session.rollback()
        raise RemoteError(f"{action} failed: {e.__class__.__name__}") from e
