"""Security — password hashing and access-token encoding/decoding.

Invariants:
    - Plain passwords are never stored or logged
    - Tokens carry sub (user id as string), role, iat, exp
    - decode_access_token raises UnauthenticatedError for any invalid/expired token

Design Decisions:
    - pbkdf2_sha256 via passlib: no native bcrypt backend to break across versions
"""

from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from worksite.config import get_settings
from worksite.core.errors import UnauthenticatedError

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def create_access_token(user_id: int, role: str) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=settings.jwt_expire_minutes)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Decode and verify a token; returns its claims."""
    settings = get_settings()
    try:
        claims = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError:
        raise UnauthenticatedError("Token has expired")
    except jwt.InvalidTokenError:
        raise UnauthenticatedError("Invalid token")
    if "sub" not in claims:
        raise UnauthenticatedError("Invalid token")
    return claims
