# vegist/repositories/product_repo.py
import uuid

from sqlmodel import Session, select

from vegist.core.errors import remote_errors
from vegist.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (queries + inserts).
    - SQLAlchemy failures surface as RemoteError.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        with remote_errors("Product lookup"):
            return session.get(Product, product_id)

    def list_all(self, session: Session) -> list[Product]:
        with remote_errors("Product listing"):
            stmt = select(Product).order_by(Product.created_at.desc())
            return list(session.exec(stmt).all())

    def list_by_category(self, session: Session, category_name: str) -> list[Product]:
        """
        Products whose category-name list contains `category_name`, newest first.

        Membership is checked on the decoded list: the stored JSON text escapes
        non-ASCII names, so it cannot be matched with LIKE.
        """
        return [p for p in self.list_all(session) if category_name in (p.categories or [])]

    def list_excluding(self, session: Session, product_id: uuid.UUID) -> list[Product]:
        with remote_errors("Product listing"):
            stmt = select(Product).where(Product.id != product_id)
            return list(session.exec(stmt).all())

    def list_newest(self, session: Session, limit: int = 12) -> list[Product]:
        with remote_errors("Product listing"):
            stmt = select(Product).order_by(Product.created_at.desc()).limit(limit)
            return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        with remote_errors("Product insert", session):
            session.add(product)
            session.commit()
            session.refresh(product)
        return product
