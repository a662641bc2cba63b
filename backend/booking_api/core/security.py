"""
Password hashing, JWT issue/verify and the current-user dependency.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from booking_api.core.config import get_settings
from booking_api.core.exceptions import Forbidden, Unauthenticated

bearer_scheme = HTTPBearer(auto_error=False)


class TokenClaims(BaseModel):
    """Identity carried inside an access token."""

    id: int
    email: str


def hash_password(password: str) -> str:
    hashed = bcrypt.hashpw(password.encode("utf-8")[:72], bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    # bcrypt only considers the first 72 bytes and rejects longer input
    candidate = plain_password.encode("utf-8")[:72]
    return bcrypt.checkpw(candidate, hashed_password.encode("utf-8"))


def create_access_token(
    user_id: int,
    email: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a token embedding {id, email} with an absolute expiry."""
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"id": user_id, "email": email, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """
    Verify a token and return its claims.
    Raises Forbidden on a bad signature, expiry or missing claims.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return TokenClaims(id=payload["id"], email=payload["email"])
    except (JWTError, KeyError, ValidationError) as exc:
        raise Forbidden() from exc


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenClaims:
    """FastAPI dependency: 401 without a bearer token, 403 on an invalid one."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    claims = decode_access_token(credentials.credentials)
    structlog.contextvars.bind_contextvars(user_id=claims.id)
    return claims


async def get_current_user_id(claims: TokenClaims = Depends(get_current_user)) -> int:
    return claims.id
