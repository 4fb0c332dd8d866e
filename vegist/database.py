# vegist/database.py
from sqlmodel import SQLModel, create_engine, Session

from vegist.core.config import get_settings

settings = get_settings()

# Postgres (Supabase pooler) needs SSL and a tiny pool: session mode caps
# the number of clients per project. SQLite URLs (local runs, tests) keep
# SQLAlchemy's defaults.
db_url = settings.DATABASE_URL
engine_options: dict = {"echo": False}

if db_url.startswith("postgres"):
    if "sslmode=" not in db_url:
        db_url += "&sslmode=require" if "?" in db_url else "?sslmode=require"
    engine_options.update(pool_pre_ping=True, pool_size=1, max_overflow=0)

engine = create_engine(db_url, **engine_options)


def create_db_and_tables() -> None:
    """Create missing storefront tables. Called from the app lifespan."""
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency: one SQLModel Session per request.

    Client storage, repositories and services all share it, so a request's
    writes go through a single connection.
    """
    with Session(engine) as session:
        yield session
