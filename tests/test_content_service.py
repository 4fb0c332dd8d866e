from datetime import timedelta

import pytest

from conftest import NOW
from vegist.models.content import BlogPost, Offer
from vegist.repositories.category_repo import CategoryRepository
from vegist.repositories.content_repo import ContentRepository
from vegist.repositories.product_repo import ProductRepository
from vegist.repositories.review_repo import ReviewRepository
from vegist.services.content_service import ContentService


@pytest.fixture
def service():
    return ContentService(
        ContentRepository(),
        ProductRepository(),
        CategoryRepository(),
        ReviewRepository(),
    )


def test_active_offer_skips_expired_and_inactive(service, session):
    repo = ContentRepository()
    repo.create_offer(session, Offer(title="Expired", end_date=NOW - timedelta(days=1)))
    repo.create_offer(
        session, Offer(title="Paused", end_date=NOW + timedelta(days=5), is_active=False)
    )
    repo.create_offer(session, Offer(title="Summer", end_date=NOW + timedelta(days=5)))

    offer = service.active_offer(session, now=NOW)

    assert offer.title == "Summer"


def test_no_offer(service, session):
    assert service.active_offer(session, now=NOW) is None


def test_only_published_posts(service, session):
    repo = ContentRepository()
    repo.create_post(session, BlogPost(title="Draft"))
    repo.create_post(session, BlogPost(title="Harvest notes", is_published=True))

    assert [p.title for p in service.blog_posts(session)] == ["Harvest notes"]


def test_products_by_type(service, session, make_product):
    make_product("Old Bestseller", product_types=["Best Seller"], created_at=NOW - timedelta(days=60))
    make_product("Fresh", created_at=NOW - timedelta(days=2))

    assert [p.name for p in service.products_by_type(session, "Best Seller", NOW)] == [
        "Old Bestseller"
    ]
    assert [p.name for p in service.products_by_type(session, "New Product", NOW)] == ["Fresh"]


def test_category_discounts_average_discounted_products_only(
    service, session, make_category, make_product
):
    make_category("Fruits")
    make_category("Dairy")
    make_product("Apple", categories=["Fruits"], discount_percentage=10)
    make_product("Mango", categories=["Fruits"], discount_percentage=15)
    make_product("Kiwi", categories=["Fruits"])

    stats = {s.category: s for s in service.category_discounts(session)}

    assert stats["Fruits"].average_discount == 13
    assert stats["Fruits"].on_sale_count == 2
    assert stats["Dairy"].average_discount == 0
