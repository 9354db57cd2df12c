"""
Password hashing and bearer-token authentication.

Tokens are stateless HS256 JWTs carrying the user id in ``sub``. Write
endpoints depend on ``get_current_user_id``; read endpoints depend on
``get_optional_user_id`` and degrade to an anonymous view.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.config import BCRYPT_ROUNDS, JWT_ALGORITHM, JWT_EXPIRE_HOURS, JWT_SECRET, MAX_SQL_INTEGER
from app.db import get_db
from app.models import User
from app.services.errors import AuthenticationError

log = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    secret = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    secret = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(secret, hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta if expires_delta is not None else timedelta(hours=JWT_EXPIRE_HOURS))
    payload = {"sub": str(user_id), "iat": now, "exp": expire}
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """
    Verify a token and return the user id it was issued for.

    Raises:
        AuthenticationError: if the token is expired, tampered with or malformed
    """
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid or expired token")

    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid or expired token")
    if not 1 <= user_id <= MAX_SQL_INTEGER:
        raise AuthenticationError("Invalid or expired token")
    return user_id


def _resolve_user_id(db: Session, credentials: Optional[HTTPAuthorizationCredentials]) -> int:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")

    user_id = decode_access_token(credentials.credentials)
    if db.get(User, user_id) is None:
        raise AuthenticationError("User for this token no longer exists")
    return user_id


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> int:
    """Dependency for state-changing endpoints: reject missing or bad credentials."""
    return _resolve_user_id(db, credentials)


def get_optional_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[int]:
    """Dependency for read-only endpoints: bad credentials mean an anonymous viewer."""
    if credentials is None:
        return None
    try:
        return _resolve_user_id(db, credentials)
    except AuthenticationError as e:
        log.debug("Ignoring rejected token on read endpoint: %s", e)
        return None
