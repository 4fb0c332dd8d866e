import random
import uuid
from datetime import timedelta

import pytest

from conftest import NOW
from vegist.core.errors import NotFoundError, ValidationError
from vegist.data.category_details import CATEGORY_DETAILS
from vegist.models.review import Review
from vegist.repositories.product_repo import ProductRepository
from vegist.repositories.review_repo import ReviewRepository
from vegist.schemas.product import ReviewCreate
from vegist.services.product_detail_service import (
    DEFAULT_PACKAGE_OPTIONS,
    ProductDetailService,
    ReviewFormState,
    category_details,
    package_options,
)


@pytest.fixture
def service():
    return ProductDetailService(ProductRepository(), ReviewRepository())


def add_review(session, product, rating, is_active=True):
    review = Review(
        product_id=product.id,
        customer_name="Gita",
        customer_email="gita@example.com",
        review_title="Fresh",
        review_text="Arrived fresh and crisp.",
        rating=rating,
        is_active=is_active,
    )
    session.add(review)
    session.commit()
    return review


def full_review(**overrides):
    data = {
        "rating": 5,
        "review_title": "Lovely",
        "review_text": "Best mangoes this season.",
        "customer_name": "Hari",
        "customer_email": "hari@example.com",
    }
    data.update(overrides)
    return ReviewCreate(**data)


def test_package_options_by_category():
    assert package_options(["Vegetables"]) == ["1 piece", "250g", "500g", "1kg"]
    assert package_options(["Beverages"]) == ["250ml", "500ml", "1L", "2L"]
    assert package_options(["Snacks"]) == DEFAULT_PACKAGE_OPTIONS
    assert package_options([]) == DEFAULT_PACKAGE_OPTIONS


def test_category_details_fall_back_to_fruits():
    assert category_details(["Meat"]) is CATEGORY_DETAILS["meat"]
    assert category_details(["Unknown", "dairy"]) is CATEGORY_DETAILS["dairy"]
    assert category_details([]) is CATEGORY_DETAILS["fruits"]


def test_detail_includes_ratings_and_category_copy(service, session, make_product):
    mango = make_product("Mango", 20, categories=["Fruits"], discount_percentage=25)
    add_review(session, mango, 5)
    add_review(session, mango, 4)
    add_review(session, mango, 1, is_active=False)

    detail = service.get_product_detail(session, str(mango.id))

    assert detail.review_count == 2
    assert detail.average_rating == pytest.approx(4.5)
    assert detail.effective_price == pytest.approx(15)
    assert detail.images == ["https://cdn.example.com/mango.png"]
    assert detail.package_options[0] == "1 piece"
    assert detail.category_title == CATEGORY_DETAILS["fruits"]["title"]
    assert detail.specifications == CATEGORY_DETAILS["fruits"]["specifications"]


def test_gallery_is_preferred_over_primary_image(service, session, make_product):
    p = make_product(
        "Kiwi",
        images=["https://cdn.example.com/kiwi-1.png", "https://cdn.example.com/kiwi-2.png"],
    )
    assert len(service.get_product_detail(session, p.id).images) == 2


def test_unknown_product_is_not_found(service, session):
    with pytest.raises(NotFoundError):
        service.get_product_detail(session, "not-a-uuid")
    with pytest.raises(NotFoundError):
        service.get_product_detail(session, str(uuid.uuid4()))


def test_reviews_are_newest_first_and_active_only(service, session, make_product):
    p = make_product()
    old = add_review(session, p, 3)
    old.created_at = NOW - timedelta(days=2)
    session.add(old)
    session.commit()
    newer = add_review(session, p, 5)
    add_review(session, p, 1, is_active=False)

    reviews = service.list_reviews(session, p.id)

    assert [r.id for r in reviews] == [newer.id, old.id]


def test_related_products_share_a_category(service, session, make_product):
    apple = make_product("Apple", categories=["Fruits"])
    make_product("Pear", categories=["Fruits", "Organic"])
    make_product("Milk", categories=["Dairy"])
    make_product("Plain")

    related = service.related_products(session, apple.id)

    assert [p.name for p in related] == ["Pear"]


def test_product_without_categories_has_no_related(service, session, make_product):
    lonely = make_product("Lonely")
    make_product("Other")
    assert service.related_products(session, lonely.id) == []


def test_random_products_exclude_current(service, session, make_product):
    current = make_product("Current")
    for i in range(6):
        make_product(f"Other {i}")

    picked = service.random_products(session, current.id, rng=random.Random(7))

    assert len(picked) == 4
    assert current.id not in {p.id for p in picked}
    assert len({p.id for p in picked}) == 4


def test_random_products_small_catalog(service, session, make_product):
    current = make_product("Current")
    make_product("Only other")
    assert len(service.random_products(session, current.id)) == 1


def test_submit_review_requires_every_field(service, session, make_product):
    p = make_product()
    with pytest.raises(ValidationError) as exc:
        service.submit_review(session, p.id, full_review(rating=0, customer_email=" "))

    assert set(exc.value.errors) == {"rating", "customer_email"}
    assert service.list_reviews(session, p.id) == []


def test_submit_review_persists(service, session, make_product):
    p = make_product()
    created = service.submit_review(session, p.id, full_review())

    assert created.topic == "Product Review"
    assert [r.id for r in service.list_reviews(session, p.id)] == [created.id]


def test_review_form_success_expires(service, session, make_product):
    p = make_product()
    form = ReviewFormState(success_seconds=3)
    form.open()
    form.rating = 4
    form.review_title = "Good"
    form.review_text = "Tasty and fresh."
    form.customer_name = "Maya"
    form.customer_email = "maya@example.com"

    form.submit(service, session, p.id, now=NOW)

    assert form.review_title == ""
    assert form.success(NOW + timedelta(seconds=1)) is True
    assert form.is_writing is True
    assert form.success(NOW + timedelta(seconds=3)) is False
    assert form.is_writing is False


def test_review_form_keeps_values_on_failure(service, session, make_product):
    p = make_product()
    form = ReviewFormState()
    form.review_title = "Half done"

    with pytest.raises(ValidationError):
        form.submit(service, session, p.id, now=NOW)

    assert form.review_title == "Half done"
    assert form.success(NOW) is False
