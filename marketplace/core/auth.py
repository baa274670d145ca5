# marketplace/core/auth.py
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel

from marketplace.core.config import get_settings

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can answer with our own 401 message.
bearer_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    """
    Identity extracted from a verified access token.

    Tokens are issued by the auth service (out of scope here) with
    claims { id, role, email }. Older tokens may carry 'sub' instead of 'id'.
    """

    id: str
    role: str | None = None
    email: str | None = None


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify an access token (JWT).

    Verification:
      - signature (JWT_ALG using JWT_SECRET)
      - expiration time (exp), when present

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser | None:
    """
    Resolve the caller from the Authorization header.

    Returns None when no header was sent.
    """
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    user_id = payload.get("id") or payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing user id",
        )

    return CurrentUser(
        id=str(user_id),
        role=payload.get("role"),
        email=payload.get("email"),
    )


def require_auth(user: CurrentUser | None = Depends(get_current_user)) -> CurrentUser:
    """
    Enforce authentication.

    Raises:
        HTTPException(401): if no valid token was sent.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
        )
    return user


def require_owner(user_id: str, user: CurrentUser = Depends(require_auth)) -> CurrentUser:
    """
    Enforce that the `{user_id}` path parameter is the caller's own id.

    Use this for user-scoped resources:
      - cart endpoints
      - order placement / own order history

    Raises:
        HTTPException(403): if the token belongs to someone else.
    """
    if user.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access your own account",
        )
    return user
