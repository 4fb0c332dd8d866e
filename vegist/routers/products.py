# vegist/routers/products.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from vegist.core.config import get_settings
from vegist.database import get_session
from vegist.repositories.product_repo import ProductRepository
from vegist.repositories.review_repo import ReviewRepository
from vegist.schemas.product import (
    ProductDetailRead,
    RatedProduct,
    ReviewCreate,
    ReviewRead,
)
from vegist.services.product_detail_service import ProductDetailService

settings = get_settings()

router = APIRouter(prefix="/products", tags=["Products"])

service = ProductDetailService(
    ProductRepository(),
    ReviewRepository(),
    sample_size=settings.RANDOM_PRODUCTS_SAMPLE,
)


@router.get("/{product_id}", response_model=ProductDetailRead)
def get_product(product_id: str, session: Session = Depends(get_session)):
    """
    Product detail: images, package options, category copy, rating.

    - 404 for unknown ids.
    """
    return service.get_product_detail(session, product_id)


@router.get("/{product_id}/reviews", response_model=list[ReviewRead])
def list_reviews(product_id: str, session: Session = Depends(get_session)):
    return service.list_reviews(session, product_id)


@router.post(
    "/{product_id}/reviews",
    response_model=ReviewRead,
    status_code=status.HTTP_201_CREATED,
)
def submit_review(
    product_id: str,
    payload: ReviewCreate,
    session: Session = Depends(get_session),
):
    """
    Add a review. Rating, title, text, name and email are all required.
    """
    return service.submit_review(session, product_id, payload)


@router.get("/{product_id}/related", response_model=list[RatedProduct])
def related_products(product_id: str, session: Session = Depends(get_session)):
    """Products sharing a category with this one."""
    return service.related_products(session, product_id)


@router.get("/{product_id}/random", response_model=list[RatedProduct])
def random_products(product_id: str, session: Session = Depends(get_session)):
    """A random sample of other products."""
    return service.random_products(session, product_id)
