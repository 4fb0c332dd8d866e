# vegist/repositories/category_repo.py
import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from vegist.core.errors import remote_errors
from vegist.models.category import Category


class CategoryRepository:
    """
    Data access layer for Category.
    """

    def list_all(self, session: Session) -> list[Category]:
        with remote_errors("Category listing"):
            stmt = select(Category).order_by(Category.name)
            return list(session.exec(stmt).all())

    def get_by_id(self, session: Session, category_id: uuid.UUID) -> Category | None:
        with remote_errors("Category lookup"):
            return session.get(Category, category_id)

    def get_by_name(self, session: Session, name: str) -> Category | None:
        """Case-insensitive lookup."""
        with remote_errors("Category lookup"):
            stmt = select(Category).where(func.lower(Category.name) == name.strip().lower())
            return session.exec(stmt).first()

    def create(self, session: Session, category: Category) -> Category:
        with remote_errors("Category insert", session):
            session.add(category)
            session.commit()
            session.refresh(category)
        return category
