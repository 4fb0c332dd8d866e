# vegist/schemas/session.py
from sqlmodel import SQLModel


class SessionToken(SQLModel):
    """
    Anonymous storefront session.

    Send `access_token` back as `Authorization: Bearer <token>`.
    """

    client_id: str
    access_token: str
    token_type: str = "bearer"


class FavoriteStatus(SQLModel):
    product_id: str
    is_favorite: bool
