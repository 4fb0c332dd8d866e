# vegist/models/subscriber.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Subscriber(SQLModel, table=True):
    """
    Newsletter subscriber and their one-time coupon.

    A coupon is redeemable at most once per email: `coupon_used` flips to
    True (with `coupon_used_at`) on redemption and never back.
    """

    __tablename__ = "subscribers"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    email: str = Field(
        unique=True,
        index=True,
    )

    coupon_code: str

    coupon_used: bool = Field(default=False)

    coupon_used_at: datetime | None = Field(default=None)

    # percentage | fixed
    discount_type: str = Field(default="percentage")

    discount_value: float = Field(default=20, ge=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
