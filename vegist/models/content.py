# vegist/models/content.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Offer(SQLModel, table=True):
    """Promotional banner offer. Shown while active and not expired."""

    __tablename__ = "offers"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)
    title: str
    description: str | None = None
    discount_percentage: float = Field(default=0, ge=0, le=100)
    image_url: str = Field(default="")
    is_active: bool = Field(default=True, index=True)
    end_date: datetime
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class BlogPost(SQLModel, table=True):
    """Storefront blog post."""

    __tablename__ = "blog_posts"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)
    title: str
    summary: str = Field(default="")
    image_url: str = Field(default="")
    author: str | None = None
    is_published: bool = Field(default=False, index=True)
    publish_date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
