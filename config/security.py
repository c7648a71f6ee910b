"""
config.security
---------------
Bearer-token authentication helpers for FastAPI routes.

This module defines:
- create_access_token() / verify_token()  → JWT encode/decode
- get_current_user()  → requires auth
- require_admin()  → requires an ADMIN caller
- ensure_self_or_admin()  → caller acts on their own resources
"""

from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Request
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from sqlalchemy.orm import Session

from config.db import get_db
from config.settings import ACCESS_TTL_MIN, JWT_ALG, JWT_ISS, JWT_SECRET
from model.enums import Role
from model.user import Users
from src.errors import ForbiddenError, UnauthorizedError

import logging
logger = logging.getLogger(__name__)

_LEEWAY = 10  # seconds of clock-skew tolerance


# ---------------------------------------------------------------------------
# TOKEN HELPERS
# ---------------------------------------------------------------------------
def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None, **claims) -> str:
    """Mint an access token for `user_id`; tokens are normally issued by the identity provider."""
    to_encode = dict(claims)
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TTL_MIN))
    to_encode.update({"sub": str(user_id), "exp": expire, "typ": "access"})
    if JWT_ISS:
        to_encode.setdefault("iss", JWT_ISS)
    return jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALG)


def _get_bearer_token(request: Request) -> Optional[str]:
    auth = request.headers.get("authorization")
    if not auth or not auth.lower().startswith("bearer "):
        return None
    return auth.split(" ", 1)[1].strip() or None


def verify_token(token: str) -> int:
    """
    Decode JWT and return the subject (user id).
    Raise UnauthorizedError for any auth problem.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[JWT_ALG],
            issuer=JWT_ISS if JWT_ISS else None,
            options={"verify_aud": False, "leeway": _LEEWAY},
        )
    except ExpiredSignatureError:
        raise UnauthorizedError("Token expired")
    except JWTError:
        # Invalid signature, issuer or malformed token
        raise UnauthorizedError("Invalid token")

    if payload.get("typ") not in ("access", "bearer", None):
        raise UnauthorizedError("Invalid token type")

    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid token subject")


# ---------------------------------------------------------------------------
# DEPENDENCIES
# ---------------------------------------------------------------------------
def get_current_user(request: Request, db: Session = Depends(get_db)) -> Users:
    """Require valid JWT and return the user."""
    token = _get_bearer_token(request)
    if not token:
        raise UnauthorizedError("Missing or invalid Authorization header")

    user = db.get(Users, verify_token(token))
    if not user:
        raise UnauthorizedError("User not found")
    return user


def is_admin(user: Users) -> bool:
    return user.role == Role.ADMIN


def require_admin(user: Users = Depends(get_current_user)) -> Users:
    if not is_admin(user):
        logger.warning(f"User {user.id} denied admin access")
        raise ForbiddenError("Admin required")
    return user


def ensure_self_or_admin(user: Users, user_id: int, allow_admin: bool = True) -> None:
    """Raise ForbiddenError unless `user` is `user_id` (or an admin, when allowed)."""
    if user.id == user_id:
        return
    if allow_admin and is_admin(user):
        return
    raise ForbiddenError("You can only act on your own account")
