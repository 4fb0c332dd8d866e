# vegist/core/session.py
"""
Anonymous storefront sessions.

The storefront has no accounts: a client (one browser profile) gets a
signed token once and sends it back as a Bearer token. The token's `sub`
is the client id that keys everything the client keeps in its store
(cart, favorites, selected category, filter state).
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from vegist.core.config import get_settings
from vegist.core.errors import SessionError
from vegist.database import get_session
from vegist.repositories.storage_repo import DatabaseStorage

settings = get_settings()

# auto_error=False => a missing Authorization header is reported as a
# SessionError (401) instead of FastAPI's default 403.
bearer_scheme = HTTPBearer(auto_error=False)

TOKEN_TYPE = "storefront-session"


def issue_session_token(client_id: str | None = None) -> tuple[str, str]:
    """
    Create a signed session token.

    Returns:
        (client_id, token)
    """
    client_id = client_id or str(uuid.uuid4())
    now = datetime.now(timezone.utc)
    claims = {
        "sub": client_id,
        "typ": TOKEN_TYPE,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(days=settings.SESSION_TTL_DAYS)).timestamp()),
    }
    token = jwt.encode(claims, settings.SESSION_SECRET, algorithm=settings.SESSION_ALG)
    return client_id, token


def decode_session_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a session token (signature + exp).

    Raises:
        SessionError: if the token is invalid, expired or not a session token.
    """
    try:
        claims = jwt.decode(
            token,
            settings.SESSION_SECRET,
            algorithms=[settings.SESSION_ALG],
        )
    except JWTError:
        raise SessionError()

    if claims.get("typ") != TOKEN_TYPE or not claims.get("sub"):
        raise SessionError("Token is not a storefront session")
    return claims


def get_client_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """
    Resolve the client id from the Bearer token.

    Raises:
        SessionError(401): if no token was sent or it does not verify.
    """
    if credentials is None:
        raise SessionError("Session token required")
    return decode_session_token(credentials.credentials)["sub"]


def get_client_storage(
    client_id: str = Depends(get_client_id),
    session: Session = Depends(get_session),
) -> DatabaseStorage:
    """FastAPI dependency: the key-value store of the calling client."""
    return DatabaseStorage(session, client_id, quota_bytes=settings.STORAGE_QUOTA_BYTES)


def get_optional_client_storage(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> DatabaseStorage | None:
    """Like get_client_storage, but anonymous callers get None."""
    if credentials is None:
        return None
    client_id = decode_session_token(credentials.credentials)["sub"]
    return DatabaseStorage(session, client_id, quota_bytes=settings.STORAGE_QUOTA_BYTES)
