# vegist/repositories/content_repo.py
from datetime import datetime

from sqlmodel import Session, select

from vegist.core.errors import remote_errors
from vegist.models.content import BlogPost, Offer


class ContentRepository:
    """
    Data access layer for home page content (offers, blog posts).
    """

    def get_active_offer(self, session: Session, now: datetime) -> Offer | None:
        """Newest active offer whose end date is still in the future."""
        with remote_errors("Offer lookup"):
            stmt = (
                select(Offer)
                .where(Offer.is_active == True)
                .where(Offer.end_date > now)
                .order_by(Offer.created_at.desc())
            )
            return session.exec(stmt).first()

    def list_published_posts(self, session: Session, limit: int = 6) -> list[BlogPost]:
        with remote_errors("Blog listing"):
            stmt = (
                select(BlogPost)
                .where(BlogPost.is_published == True)
                .order_by(BlogPost.publish_date.desc())
                .limit(limit)
            )
            return list(session.exec(stmt).all())

    def create_offer(self, session: Session, offer: Offer) -> Offer:
        with remote_errors("Offer insert", session):
            session.add(offer)
            session.commit()
            session.refresh(offer)
        return offer

    def create_post(self, session: Session, post: BlogPost) -> BlogPost:
        with remote_errors("Blog insert", session):
            session.add(post)
            session.commit()
            session.refresh(post)
        return post
