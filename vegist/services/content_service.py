# vegist/services/content_service.py
import logging
import math
from datetime import datetime, timezone

from sqlmodel import Session

from vegist.core.errors import RemoteError
from vegist.core.storage_utils import resolve_image_url
from vegist.repositories.category_repo import CategoryRepository
from vegist.repositories.content_repo import ContentRepository
from vegist.repositories.product_repo import ProductRepository
from vegist.repositories.review_repo import ReviewRepository
from vegist.schemas.content import BlogPostRead, CategoryDiscount, OfferRead
from vegist.schemas.product import ProductRead, ReviewRead
from vegist.services.catalog_filter import NEW_PRODUCT, is_new_product
from vegist.services.catalog_service import to_product_read

logger = logging.getLogger(__name__)

BLOG_LIMIT = 6
TRENDING_LIMIT = 12
LATEST_REVIEWS_LIMIT = 10


class ContentService:
    """
    Read-only home page content.

    Every query degrades to an empty result when the data store fails.
    """

    def __init__(
        self,
        content_repo: ContentRepository,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
        review_repo: ReviewRepository,
    ):
        self.content_repo = content_repo
        self.product_repo = product_repo
        self.category_repo = category_repo
        self.review_repo = review_repo

    def active_offer(self, session: Session, now: datetime | None = None) -> OfferRead | None:
        now = now or datetime.now(timezone.utc)
        try:
            offer = self.content_repo.get_active_offer(session, now)
        except RemoteError as e:
            logger.error("Error fetching offer: %s", e.detail)
            return None
        if offer is None:
            return None
        read = OfferRead.model_validate(offer)
        return read.model_copy(update={"image_url": resolve_image_url(read.image_url)})

    def blog_posts(self, session: Session) -> list[BlogPostRead]:
        try:
            posts = self.content_repo.list_published_posts(session, limit=BLOG_LIMIT)
        except RemoteError as e:
            logger.error("Error fetching blog posts: %s", e.detail)
            return []
        return [
            BlogPostRead.model_validate(p).model_copy(
                update={"image_url": resolve_image_url(p.image_url)}
            )
            for p in posts
        ]

    def trending_products(self, session: Session) -> list[ProductRead]:
        try:
            products = self.product_repo.list_newest(session, limit=TRENDING_LIMIT)
        except RemoteError as e:
            logger.error("Error fetching trending products: %s", e.detail)
            return []
        return [to_product_read(p) for p in products]

    def products_by_type(
        self,
        session: Session,
        product_type: str,
        now: datetime | None = None,
    ) -> list[ProductRead]:
        """
        Home page tabs. "New Product" means created in the last 30 days;
        other types match the stored tags.
        """
        try:
            products = [to_product_read(p) for p in self.product_repo.list_all(session)]
        except RemoteError as e:
            logger.error("Error fetching products: %s", e.detail)
            return []

        if product_type == NEW_PRODUCT:
            return [p for p in products if is_new_product(p, now)]
        return [p for p in products if product_type in p.product_types]

    def latest_reviews(self, session: Session) -> list[ReviewRead]:
        try:
            reviews = self.review_repo.list_latest(session, limit=LATEST_REVIEWS_LIMIT)
        except RemoteError as e:
            logger.error("Error fetching reviews: %s", e.detail)
            return []
        return [ReviewRead.model_validate(r) for r in reviews]

    def category_discounts(self, session: Session) -> list[CategoryDiscount]:
        """Average discount and number of discounted products per category."""
        try:
            categories = self.category_repo.list_all(session)
            products = self.product_repo.list_all(session)
        except RemoteError as e:
            logger.error("Error fetching discount stats: %s", e.detail)
            return []

        stats = []
        for c in categories:
            discounts = [
                p.discount_percentage
                for p in products
                if c.name in (p.categories or []) and p.discount_percentage > 0
            ]
            # half-up, not banker's rounding
            average = math.floor(sum(discounts) / len(discounts) + 0.5) if discounts else 0
            stats.append(
                CategoryDiscount(
                    category=c.name,
                    average_discount=average,
                    on_sale_count=len(discounts),
                )
            )
        return stats
