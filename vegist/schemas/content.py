# vegist/schemas/content.py
import uuid
from datetime import datetime

from pydantic import field_validator
from sqlmodel import SQLModel

from vegist.schemas.product import as_utc


class OfferRead(SQLModel):
    id: uuid.UUID
    title: str
    description: str | None
    discount_percentage: float
    image_url: str
    end_date: datetime

    @field_validator("end_date")
    @classmethod
    def normalize_end_date(cls, v: datetime) -> datetime:
        return as_utc(v)


class BlogPostRead(SQLModel):
    id: uuid.UUID
    title: str
    summary: str
    image_url: str
    author: str | None
    publish_date: datetime

    @field_validator("publish_date")
    @classmethod
    def normalize_publish_date(cls, v: datetime) -> datetime:
        return as_utc(v)


class CategoryDiscount(SQLModel):
    """
    Sale badge for a category tile.

    `average_discount` is the rounded mean over discounted products only.
    """

    category: str
    average_discount: int
    on_sale_count: int
