# cybertaxi/utils/security.py
"""
Password hashing (bcrypt) and bearer-token handling (JWT via python-jose).

get_current_player is the FastAPI dependency every protected route uses.
It only proves *who* is calling; ownership checks live in identity_service.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from cybertaxi.config import settings
from cybertaxi.utils.errors import Unauthenticated
from cybertaxi.utils.logger import get_logger

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class TokenClaims:
    player_id: int


# ── Passwords ────────────────────────────────────────────────────────────────

def hash_password(plain: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: Optional[str]) -> bool:
    """Return False for missing or malformed hashes rather than raising."""
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


# ── Tokens ───────────────────────────────────────────────────────────────────

def create_access_token(player_id: int, expires_minutes: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    lifetime = timedelta(minutes=expires_minutes or settings.JWT_EXPIRES_MINUTES)
    payload = {
        "player_id": player_id,
        "sub": str(player_id),
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenClaims:
    """Verify signature + expiry and return the embedded public player_id."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"[AUTH] JWT verification failed: {e}")
        raise Unauthenticated("Invalid token", details=str(e))

    player_id = payload.get("player_id")
    if isinstance(player_id, bool) or not isinstance(player_id, int):
        logger.warning(f"[AUTH] Token without a numeric player_id: {payload!r}")
        raise Unauthenticated("Invalid token", details="Token payload has no player_id")
    return TokenClaims(player_id=player_id)


def get_current_player(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenClaims:
    """FastAPI dependency, 401 when the bearer token is missing or invalid."""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("No token provided", details="JWT token required in Authorization header")
    return decode_access_token(credentials.credentials)
