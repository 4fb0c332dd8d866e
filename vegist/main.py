# vegist/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from vegist.core.config import get_settings
from vegist.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from vegist.models import product as _product_models  # noqa: F401
from vegist.models import category as _category_models  # noqa: F401
from vegist.models import review as _review_models  # noqa: F401
from vegist.models import subscriber as _subscriber_models  # noqa: F401
from vegist.models import content as _content_models  # noqa: F401
from vegist.models import order as _order_models  # noqa: F401
from vegist.models import storage as _storage_models  # noqa: F401

# Routers
from vegist.routers.session import router as session_router
from vegist.routers.categories import router as categories_router
from vegist.routers.catalog import router as catalog_router
from vegist.routers.products import router as products_router
from vegist.routers.cart import router as cart_router
from vegist.routers.favorites import router as favorites_router
from vegist.routers.checkout import router as checkout_router
from vegist.routers.subscribers import router as subscribers_router
from vegist.routers.content import router as content_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup creates any missing storefront tables. A database that cannot
    be reached aborts startup.
    """
    logger.info("🔄 Startup: Connecting to the storefront database...")
    try:
        create_db_and_tables()
        logger.info("✅ Startup: storefront tables ready.")
    except Exception as e:
        logger.error(f"❌ Startup: could not prepare the database: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(session_router, prefix=settings.API_V1_STR)
app.include_router(categories_router, prefix=settings.API_V1_STR)
app.include_router(catalog_router, prefix=settings.API_V1_STR)
app.include_router(products_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(favorites_router, prefix=settings.API_V1_STR)
app.include_router(checkout_router, prefix=settings.API_V1_STR)
app.include_router(subscribers_router, prefix=settings.API_V1_STR)
app.include_router(content_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "vegist-storefront"}
