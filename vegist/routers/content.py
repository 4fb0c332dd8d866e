# vegist/routers/content.py
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from vegist.database import get_session
from vegist.repositories.category_repo import CategoryRepository
from vegist.repositories.content_repo import ContentRepository
from vegist.repositories.product_repo import ProductRepository
from vegist.repositories.review_repo import ReviewRepository
from vegist.schemas.content import BlogPostRead, CategoryDiscount, OfferRead
from vegist.schemas.product import ProductRead, ReviewRead
from vegist.services.content_service import ContentService

router = APIRouter(prefix="/content", tags=["Content"])

service = ContentService(
    ContentRepository(),
    ProductRepository(),
    CategoryRepository(),
    ReviewRepository(),
)


@router.get("/offer", response_model=OfferRead | None)
def active_offer(session: Session = Depends(get_session)):
    """Banner offer: newest active offer that has not ended (or null)."""
    return service.active_offer(session)


@router.get("/blog", response_model=list[BlogPostRead])
def blog_posts(session: Session = Depends(get_session)):
    return service.blog_posts(session)


@router.get("/trending", response_model=list[ProductRead])
def trending_products(session: Session = Depends(get_session)):
    return service.trending_products(session)


@router.get("/products", response_model=list[ProductRead])
def products_by_type(
    product_type: str = Query(default="Best Seller", alias="type"),
    session: Session = Depends(get_session),
):
    """Home page tabs: Best Seller, Special Product, New Product."""
    return service.products_by_type(session, product_type)


@router.get("/reviews", response_model=list[ReviewRead])
def latest_reviews(session: Session = Depends(get_session)):
    return service.latest_reviews(session)


@router.get("/category-discounts", response_model=list[CategoryDiscount])
def category_discounts(session: Session = Depends(get_session)):
    return service.category_discounts(session)
