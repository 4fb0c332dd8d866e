# vegist/routers/categories.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from vegist.core.config import get_settings
from vegist.database import get_session
from vegist.repositories.category_repo import CategoryRepository
from vegist.repositories.product_repo import ProductRepository
from vegist.schemas.product import CategoryRead
from vegist.services.catalog_service import CatalogService

settings = get_settings()

router = APIRouter(prefix="/categories", tags=["Categories"])

service = CatalogService(ProductRepository(), CategoryRepository(), page_size=settings.PAGE_SIZE)


@router.get("", response_model=list[CategoryRead])
def list_categories(session: Session = Depends(get_session)):
    """
    Categories with product counts, "All Products" first.

    - Public endpoint.
    - Empty list if the data store is unavailable.
    """
    return service.list_categories(session)


@router.get("/{category_ref}", response_model=CategoryRead)
def get_category(category_ref: str, session: Session = Depends(get_session)):
    """
    Resolve a category by id or name (unknown -> All Products).
    """
    return service.resolve_category(session, category_ref)
