# vegist/schemas/subscriber.py
from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel


class SubscribeRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def strip(cls, v):
        return v.strip() if isinstance(v, str) else v


class SubscriberStatus(SQLModel):
    """
    Outcome of a subscription.

    `created` is False when the email was already subscribed; the coupon
    code is only handed out while it is unused.
    """

    email: str
    created: bool
    coupon_used: bool
    coupon_code: str | None
    discount_value: float
    message: str
