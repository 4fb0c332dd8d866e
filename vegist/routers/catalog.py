# vegist/routers/catalog.py
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from vegist.core.config import get_settings
from vegist.core.session import get_client_storage
from vegist.database import get_session
from vegist.repositories.category_repo import CategoryRepository
from vegist.repositories.product_repo import ProductRepository
from vegist.repositories.storage_repo import DatabaseStorage
from vegist.schemas.catalog import CatalogActionRequest, CatalogPage
from vegist.services.catalog_service import CatalogService

settings = get_settings()

router = APIRouter(prefix="/catalog", tags=["Catalog"])

service = CatalogService(ProductRepository(), CategoryRepository(), page_size=settings.PAGE_SIZE)


@router.get("", response_model=CatalogPage)
def view_catalog(
    page: int | None = Query(default=None, ge=1),
    session: Session = Depends(get_session),
    storage: DatabaseStorage = Depends(get_client_storage),
):
    """
    Current page of the client's selected category with its filters applied.

    - `page` moves to that page (clamped to the last page).
    """
    return service.view(session, storage, page)


@router.put("/category/{category_ref}", response_model=CatalogPage)
def select_category(
    category_ref: str,
    session: Session = Depends(get_session),
    storage: DatabaseStorage = Depends(get_client_storage),
):
    """
    Switch to a category (id or name). Resets every filter.
    """
    return service.select_category(session, storage, category_ref)


@router.post("/actions", response_model=CatalogPage)
def dispatch_action(
    payload: CatalogActionRequest,
    session: Session = Depends(get_session),
    storage: DatabaseStorage = Depends(get_client_storage),
):
    """
    Apply one filter action, e.g.

        {"action": {"type": "set_slider", "min": 5, "max": 20}}
        {"action": {"type": "apply_price"}}
        {"action": {"type": "set_sort", "sort_by": "price-low"}}
    """
    return service.dispatch(session, storage, payload.action)
