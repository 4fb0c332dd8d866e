# vegist/routers/session.py
from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials

from vegist.core.session import bearer_scheme, decode_session_token, issue_session_token
from vegist.schemas.session import SessionToken

router = APIRouter(prefix="/session", tags=["Session"])


@router.post("", response_model=SessionToken, status_code=status.HTTP_201_CREATED)
def start_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
):
    """
    Issue an anonymous session token.

    - Without a token: a new client id.
    - With a valid token: a fresh token for the same client (renewal).
    """
    client_id = None
    if credentials is not None:
        client_id = decode_session_token(credentials.credentials)["sub"]

    client_id, token = issue_session_token(client_id)
    return SessionToken(client_id=client_id, access_token=token)
