import logging
from datetime import datetime, timedelta
from typing import Optional

import jwt

from core.config import settings

logger = logging.getLogger(__name__)

STAFF_ROLE = "staff"


def create_access_token(claims: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Sign ``claims`` with an issue time and an expiry."""
    issued_at = datetime.now(settings.APP_TIMEZONE)
    lifetime = expires_delta or timedelta(days=settings.STAFF_TOKEN_DAYS)
    payload = {**claims, "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_staff_token(staff_name: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a token for floor staff allowed to resolve waiter calls."""
    return create_access_token({"sub": staff_name, "role": STAFF_ROLE}, expires_delta)


def decode_access_token(token: str) -> Optional[dict]:
    """Return the verified claims, or None for expired and tampered tokens."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("[Auth] Rejected expired token")
    except jwt.InvalidTokenError:
        logger.warning("[Auth] Rejected invalid token")
    return None


def get_staff_name_from_token(token: str) -> Optional[str]:
    """Return the staff name for a valid staff token, None otherwise."""
    claims = decode_access_token(token)
    if claims is None or claims.get("role") != STAFF_ROLE:
        return None
    return claims.get("sub")
