# vegist/repositories/review_repo.py
import uuid
from typing import Iterable

from sqlalchemy import func
from sqlmodel import Session, select

from vegist.core.errors import remote_errors
from vegist.models.review import Review


class ReviewRepository:
    """
    Data access layer for customer reviews.

    Only active reviews are read back.
    """

    def list_for_product(self, session: Session, product_id: uuid.UUID) -> list[Review]:
        with remote_errors("Review listing"):
            stmt = (
                select(Review)
                .where(Review.product_id == product_id)
                .where(Review.is_active == True)
                .order_by(Review.created_at.desc())
            )
            return list(session.exec(stmt).all())

    def list_latest(self, session: Session, limit: int = 10) -> list[Review]:
        with remote_errors("Review listing"):
            stmt = (
                select(Review)
                .where(Review.is_active == True)
                .order_by(Review.created_at.desc())
                .limit(limit)
            )
            return list(session.exec(stmt).all())

    def rating_stats(
        self,
        session: Session,
        product_ids: Iterable[uuid.UUID],
    ) -> dict[uuid.UUID, tuple[float, int]]:
        """
        Average rating and review count per product.

        Products without active reviews are absent from the result.
        """
        ids = list(product_ids)
        if not ids:
            return {}

        with remote_errors("Review aggregation"):
            stmt = (
                select(Review.product_id, func.avg(Review.rating), func.count(Review.id))
                .where(Review.product_id.in_(ids))
                .where(Review.is_active == True)
                .group_by(Review.product_id)
            )
            rows = session.exec(stmt).all()
        return {pid: (float(avg or 0), int(count)) for pid, avg, count in rows}

    def create(self, session: Session, review: Review) -> Review:
        with remote_errors("Review insert", session):
            session.add(review)
            session.commit()
            session.refresh(review)
        return review
