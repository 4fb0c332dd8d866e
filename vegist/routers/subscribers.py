# vegist/routers/subscribers.py
from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from vegist.core.session import get_client_storage, get_optional_client_storage
from vegist.database import get_session
from vegist.repositories.storage_repo import DatabaseStorage
from vegist.repositories.subscriber_repo import SubscriberRepository
from vegist.schemas.subscriber import SubscribeRequest, SubscriberStatus
from vegist.services.coupon_service import CouponService

router = APIRouter(prefix="/subscribers", tags=["Subscribers"])

service = CouponService(SubscriberRepository())


@router.post("", response_model=SubscriberStatus)
def subscribe(
    payload: SubscribeRequest,
    response: Response,
    session: Session = Depends(get_session),
    storage: DatabaseStorage | None = Depends(get_optional_client_storage),
):
    """
    Subscribe to the newsletter and receive the one-time coupon.

    - 201 for a new subscriber, 200 if the email was already subscribed.
    - With a session token, the email is remembered for this client.
    """
    result = service.subscribe(session, str(payload.email), storage)
    if result.created:
        response.status_code = status.HTTP_201_CREATED
    return result


@router.get("/me", response_model=SubscriberStatus | None)
def my_subscription(
    session: Session = Depends(get_session),
    storage: DatabaseStorage = Depends(get_client_storage),
):
    """Subscription status of the email this client subscribed with."""
    return service.remembered_status(session, storage)
