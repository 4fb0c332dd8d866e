# vegist/models/product.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Grocery catalog entry.

    Classification is by category *name* membership (`categories`), not by a
    single foreign key; a product can sit in several categories.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
        description="Display name of the product",
    )

    description: str = Field(
        default="",
        description="Long description",
    )

    price: float = Field(
        gt=0,
        description="Unit price before discount",
    )

    image_url: str = Field(
        default="",
        description="Primary image (absolute URL or bucket path)",
    )

    images: list[str] | None = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Optional gallery; falls back to [image_url]",
    )

    categories: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False, default=list),
        description="Names of the categories this product belongs to",
    )

    product_types: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False, default=list),
        description="Tags such as 'Best Seller' or 'Special Product'",
    )

    in_stock: bool = Field(
        default=True,
        index=True,
    )

    discount_percentage: float = Field(
        default=0,
        ge=0,
        le=100,
        description="0 when the product is not discounted",
    )

    material: str | None = Field(
        default=None,
        description="Optional material / origin tag used by the material filter",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
