# vegist/repositories/subscriber_repo.py
from datetime import datetime, timezone

from sqlalchemy import update
from sqlmodel import Session, select

from vegist.core.errors import remote_errors
from vegist.models.subscriber import Subscriber


class SubscriberRepository:
    """
    Data access layer for newsletter subscribers and their coupons.
    """

    def get_by_email(self, session: Session, email: str) -> Subscriber | None:
        with remote_errors("Subscriber lookup"):
            stmt = select(Subscriber).where(Subscriber.email == email)
            return session.exec(stmt).first()

    def create(self, session: Session, subscriber: Subscriber) -> Subscriber:
        """
        Insert a subscriber.

        A duplicate email raises RemoteError (IntegrityError); callers check
        `get_by_email` first.
        """
        with remote_errors("Subscriber insert", session):
            session.add(subscriber)
            session.commit()
            session.refresh(subscriber)
        return subscriber

    def mark_coupon_used(self, session: Session, email: str, code: str) -> bool:
        """
        Flip `coupon_used` for (email, code) if it is still unused.

        Single conditional UPDATE, so two concurrent redemptions cannot both
        succeed. Nothing is committed: the flag lands together with the order
        that uses it, or is rolled back with it.

        Returns:
            True if this call redeemed the coupon.
        """
        stmt = (
            update(Subscriber)
            .where(Subscriber.email == email)
            .where(Subscriber.coupon_code == code)
            .where(Subscriber.coupon_used == False)
            .values(coupon_used=True, coupon_used_at=datetime.now(timezone.utc))
        )
        with remote_errors("Coupon redemption", session):
            result = session.execute(stmt)
            session.flush()
        return result.rowcount == 1
