# vegist/schemas/product.py
import uuid
from datetime import datetime, timezone

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps (SQLite round-trips) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ProductRead(SQLModel):
    """
    Product representation used by every catalog computation.

    Repositories hand out table rows; services convert them to this closed
    type before filtering, sorting or pricing.
    """

    id: uuid.UUID
    name: str
    description: str = ""
    price: float = Field(gt=0)
    image_url: str = ""
    images: list[str] | None = None
    categories: list[str] = Field(default_factory=list)
    product_types: list[str] = Field(default_factory=list)
    in_stock: bool = True
    discount_percentage: float = Field(default=0, ge=0, le=100)
    material: str | None = None
    created_at: datetime

    @field_validator("categories", "product_types", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        return as_utc(v)


class RatedProduct(ProductRead):
    """
    Product card with review aggregates (related / random / trending lists).
    """

    average_rating: float = 0.0
    review_count: int = 0


class ProductDetailRead(RatedProduct):
    """
    Product detail page payload.
    """

    images: list[str]
    package_options: list[str]
    category_title: str = ""
    highlights: list[str] = Field(default_factory=list)
    specifications: dict[str, str] = Field(default_factory=dict)
    effective_price: float


class CategoryRead(SQLModel):
    """
    Category with its derived product count.

    The synthetic "All Products" entry uses the id 'all-products'.
    """

    id: str
    name: str
    image_url: str = ""
    description: str | None = None
    product_count: int = 0


class ReviewRead(SQLModel):
    id: uuid.UUID
    product_id: uuid.UUID
    customer_name: str
    review_title: str
    review_text: str
    rating: int
    topic: str
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        return as_utc(v)


class ReviewCreate(SQLModel):
    """
    Review submission.

    All of rating, title, text, name and email are required; the form is
    checked by the service so every missing field is reported at once.
    """

    model_config = ConfigDict(extra="forbid")

    rating: int = 0
    review_title: str = ""
    review_text: str = ""
    customer_name: str = ""
    customer_email: str = ""

    @field_validator("review_title", "review_text", "customer_name", "customer_email")
    @classmethod
    def strip(cls, v: str) -> str:
        return v.strip()

