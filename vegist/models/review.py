# vegist/models/review.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Review(SQLModel, table=True):
    """
    Customer review of a product.

    Only active reviews are shown and counted in ratings.
    """

    __tablename__ = "customer_reviews"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    customer_name: str
    customer_email: str
    review_title: str
    review_text: str

    rating: int = Field(ge=1, le=5)

    topic: str = Field(default="Product Review")

    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
