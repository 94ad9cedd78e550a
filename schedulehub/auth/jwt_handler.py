"""Access token creation and verification using HS256."""

from datetime import datetime, timedelta, timezone

import jwt

from schedulehub.config import get_settings

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["sub", "email", "role", "iat", "exp"]


def create_token(
    staff_id: int,
    email: str,
    role: str,
    expire_hours: int | None = None,
    issued_at: datetime | None = None,
    secret: str | None = None,
) -> str:
    """Sign an access token with the server secret. Returns the encoded token string."""
    settings = get_settings()
    now = issued_at or datetime.now(timezone.utc)
    hours = expire_hours if expire_hours is not None else settings.TOKEN_EXPIRE_HOURS
    payload = {
        "sub": str(staff_id),
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + timedelta(hours=hours),
    }
    return jwt.encode(payload, secret or settings.JWT_SECRET, algorithm=ALGORITHM)


def verify_token(token: str, secret: str | None = None) -> dict:
    """Verify signature and expiry. Returns the decoded payload.

    Raises jwt.PyJWTError on invalid/expired tokens or missing claims.
    """
    return jwt.decode(
        token,
        secret or get_settings().JWT_SECRET,
        algorithms=[ALGORITHM],
        options={"require": REQUIRED_CLAIMS},
    )
