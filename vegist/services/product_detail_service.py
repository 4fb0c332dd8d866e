# vegist/services/product_detail_service.py
import logging
import random
import uuid
from datetime import datetime, timedelta, timezone

from sqlmodel import Session

from vegist.core.errors import NotFoundError, RemoteError, ValidationError
from vegist.data.category_details import CATEGORY_DETAILS, DEFAULT_CATEGORY_KEY
from vegist.models.product import Product
from vegist.models.review import Review
from vegist.repositories.product_repo import ProductRepository
from vegist.repositories.review_repo import ReviewRepository
from vegist.schemas.product import (
    ProductDetailRead,
    ProductRead,
    RatedProduct,
    ReviewCreate,
    ReviewRead,
)
from vegist.services import pricing
from vegist.services.catalog_service import to_product_read

logger = logging.getLogger(__name__)

RANDOM_SAMPLE_SIZE = 4

# Checked in order; the first category the product belongs to wins.
PACKAGE_OPTIONS: list[tuple[tuple[str, ...], list[str]]] = [
    (("Fruits", "Vegetables"), ["1 piece", "250g", "500g", "1kg"]),
    (("Beverages",), ["250ml", "500ml", "1L", "2L"]),
    (("Dairy",), ["250ml", "500ml", "1L", "2L", "250g", "500g"]),
]
DEFAULT_PACKAGE_OPTIONS = ["250g", "500g", "1kg"]


def parse_product_id(raw: str | uuid.UUID) -> uuid.UUID:
    """Product ids arrive as strings; anything that is not a UUID is unknown."""
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise NotFoundError("Product not found")


def package_options(categories: list[str]) -> list[str]:
    for names, options in PACKAGE_OPTIONS:
        if any(name in categories for name in names):
            return list(options)
    return list(DEFAULT_PACKAGE_OPTIONS)


def category_details(categories: list[str]) -> dict:
    """Static copy of the first known category, else the default one."""
    for name in categories:
        key = name.lower()
        if key in CATEGORY_DETAILS:
            return CATEGORY_DETAILS[key]
    return CATEGORY_DETAILS[DEFAULT_CATEGORY_KEY]


def product_images(product: ProductRead) -> list[str]:
    if product.images:
        return list(product.images)
    return [product.image_url] if product.image_url else []


class ProductDetailService:
    """
    Product detail page.

    Responsibilities:
      - decorate a product with images, package options and category copy
      - review-derived rating aggregates
      - related (shared category) and random product sets
      - review submission
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        review_repo: ReviewRepository,
        sample_size: int = RANDOM_SAMPLE_SIZE,
    ):
        self.product_repo = product_repo
        self.review_repo = review_repo
        self.sample_size = sample_size

    # ---- helpers ----

    def _get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        try:
            product = self.product_repo.get_by_id(session, product_id)
        except RemoteError as e:
            logger.error("Error fetching product %s: %s", product_id, e.detail)
            product = None
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def _rated(self, session: Session, products: list[Product]) -> list[RatedProduct]:
        try:
            stats = self.review_repo.rating_stats(session, [p.id for p in products])
        except RemoteError as e:
            logger.error("Error fetching review stats: %s", e.detail)
            stats = {}

        rated = []
        for p in products:
            average, count = stats.get(p.id, (0.0, 0))
            rated.append(
                RatedProduct(
                    **to_product_read(p).model_dump(),
                    average_rating=average,
                    review_count=count,
                )
            )
        return rated

    # ---- public operations ----

    def get_product_detail(self, session: Session, product_id) -> ProductDetailRead:
        """
        Raises:
            NotFoundError: unknown id, or the product could not be loaded
        """
        product = self._get_product(session, parse_product_id(product_id))
        rated = self._rated(session, [product])[0]
        details = category_details(rated.categories)

        return ProductDetailRead(
            **rated.model_dump(exclude={"images"}),
            images=product_images(rated),
            package_options=package_options(rated.categories),
            category_title=details["title"],
            highlights=list(details["points"]),
            specifications=dict(details["specifications"]),
            effective_price=pricing.effective_price(rated.price, rated.discount_percentage),
        )

    def list_reviews(self, session: Session, product_id) -> list[ReviewRead]:
        """Active reviews, newest first. Failures yield an empty list."""
        try:
            reviews = self.review_repo.list_for_product(session, parse_product_id(product_id))
        except RemoteError as e:
            logger.error("Error fetching reviews: %s", e.detail)
            return []
        return [ReviewRead.model_validate(r) for r in reviews]

    def related_products(self, session: Session, product_id) -> list[RatedProduct]:
        """Products sharing at least one category with the given product."""
        product = self._get_product(session, parse_product_id(product_id))
        categories = set(product.categories or [])
        if not categories:
            return []

        try:
            others = self.product_repo.list_excluding(session, product.id)
        except RemoteError as e:
            logger.error("Error fetching related products: %s", e.detail)
            return []

        related = [p for p in others if categories.intersection(p.categories or [])]
        return self._rated(session, related)

    def random_products(
        self,
        session: Session,
        product_id,
        rng: random.Random | None = None,
    ) -> list[RatedProduct]:
        """Unweighted sample of the rest of the catalog."""
        pid = parse_product_id(product_id)
        rng = rng or random.Random()

        try:
            others = self.product_repo.list_excluding(session, pid)
        except RemoteError as e:
            logger.error("Error fetching random products: %s", e.detail)
            return []

        picked = rng.sample(others, min(self.sample_size, len(others)))
        return self._rated(session, picked)

    def submit_review(self, session: Session, product_id, payload: ReviewCreate) -> ReviewRead:
        """
        Create a review. Every field is required.

        Raises:
            ValidationError: missing fields or rating outside 1..5
            NotFoundError: unknown product
        """
        errors = review_errors(payload)
        if errors:
            raise ValidationError(errors, "Please fill in all required fields")

        product = self._get_product(session, parse_product_id(product_id))
        review = Review(
            product_id=product.id,
            customer_name=payload.customer_name,
            customer_email=payload.customer_email,
            review_title=payload.review_title,
            review_text=payload.review_text,
            rating=payload.rating,
            topic="Product Review",
        )
        created = self.review_repo.create(session, review)
        logger.info("Review %s added to product %s", created.id, product.id)
        return ReviewRead.model_validate(created)


def review_errors(payload: ReviewCreate) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not payload.rating:
        errors["rating"] = "Rating is required"
    elif not 1 <= payload.rating <= 5:
        errors["rating"] = "Rating must be between 1 and 5"
    if not payload.review_title:
        errors["review_title"] = "Review title is required"
    if not payload.review_text:
        errors["review_text"] = "Review text is required"
    if not payload.customer_name:
        errors["customer_name"] = "Name is required"
    if not payload.customer_email:
        errors["customer_email"] = "Email is required"
    return errors


class ReviewFormState:
    """
    Review form of the detail page.

    After a successful submission the fields are cleared and `success`
    stays True for `success_seconds`, then the form closes.
    """

    def __init__(self, success_seconds: int = 3):
        self.success_seconds = success_seconds
        self.is_writing = False
        self.submitted_at: datetime | None = None
        self.reset()

    def reset(self) -> None:
        self.rating = 0
        self.review_title = ""
        self.review_text = ""
        self.customer_name = ""
        self.customer_email = ""

    def open(self) -> None:
        self.is_writing = True

    def payload(self) -> ReviewCreate:
        return ReviewCreate(
            rating=self.rating,
            review_title=self.review_title,
            review_text=self.review_text,
            customer_name=self.customer_name,
            customer_email=self.customer_email,
        )

    def submit(
        self,
        service: ProductDetailService,
        session: Session,
        product_id,
        now: datetime | None = None,
    ) -> ReviewRead:
        """Submit through the service; the fields survive a failed attempt."""
        created = service.submit_review(session, product_id, self.payload())
        self.reset()
        self.submitted_at = now or datetime.now(timezone.utc)
        return created

    def success(self, now: datetime | None = None) -> bool:
        if self.submitted_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        if now - self.submitted_at < timedelta(seconds=self.success_seconds):
            return True
        self.submitted_at = None
        self.is_writing = False
        return False
