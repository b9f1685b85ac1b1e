"""
Authentication dependencies for FastAPI routes.

Two filters run in order on every protected route:

1. ``get_request_user`` (token authentication) resolves the caller from a
   bearer token or ``access_token`` cookie. No token means anonymous; a bad
   token is rejected.
2. ``get_current_user`` (authorization) requires that step 1 produced a user.
"""

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from core.constants import NOT_AUTHENTICATED
from core.db import get_db
from core.models import User
from core.repositories import TokenBlacklistRepository, UserRepository

from .jwt import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_request_user(
    token_header: str | None = Depends(oauth2_scheme),
    access_token_cookie: str | None = Cookie(None, alias="access_token"),
    db: Session = Depends(get_db),
) -> User | None:
    """
    Resolve the user behind the request token, if any.

    Steps:
    1) Take the token from the Authorization header, else the cookie.
    2) Decode the JWT and extract subject (user id) and jti.
    3) Reject if the token is blacklisted (revoked).
    4) Load the user from DB or reject.
    """
    token = token_header or access_token_cookie
    if not token:
        return None

    try:
        payload = decode_access_token(token)
    except ValueError:
        raise _unauthorized("Invalid authentication credentials") from None

    jti = payload.get("jti")
    if jti and TokenBlacklistRepository(db).is_blacklisted(jti):
        raise _unauthorized("Token has been revoked")

    user_id = payload.get("sub")
    if not user_id or not str(user_id).isdigit():
        raise _unauthorized("Invalid authentication credentials")

    user = UserRepository(db).get_by_id(int(user_id))
    if not user:
        raise _unauthorized("User not found")
    return user


def get_current_user(user: User | None = Depends(get_request_user)) -> User:
    """Require an authenticated user."""
    if user is None:
        raise _unauthorized(NOT_AUTHENTICATED)
    return user
