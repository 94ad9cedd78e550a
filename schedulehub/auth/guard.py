"""Access guard: token authentication and role authorization.

Protected routes depend on one of:

    identity: Identity = Depends(get_identity)
    identity: Identity = Depends(require_admin)
"""

import logging

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from schedulehub.auth.jwt_handler import verify_token
from schedulehub.exceptions import Forbidden, Unauthenticated
from schedulehub.schemas import Identity, Role

logger = logging.getLogger(__name__)

ROLE_RANK = {Role.STAFF: 1, Role.ADMIN: 2}

# auto_error=False so a missing header reaches our own 401 instead of FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def authenticate(token: str | None) -> Identity:
    """Decode an access token into an Identity. Any failure raises Unauthenticated."""
    if not token:
        raise Unauthenticated("Access token required")
    try:
        payload = verify_token(token)
        return Identity(
            staff_id=int(payload["sub"]),
            email=payload["email"],
            role=Role(payload["role"]),
        )
    except jwt.PyJWTError as exc:
        logger.info("Rejected access token: %s", exc)
        raise Unauthenticated() from exc
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Rejected access token with malformed claims: %s", exc)
        raise Unauthenticated() from exc


def authorize(identity: Identity, required_role: Role) -> Identity:
    """Allow when the identity's role meets or exceeds required_role."""
    if ROLE_RANK[identity.role] < ROLE_RANK[required_role]:
        logger.warning(
            "Forbidden: staff id=%d role=%s needs %s",
            identity.staff_id, identity.role.value, required_role.value,
        )
        raise Forbidden()
    return identity


async def get_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity:
    """Dependency: the authenticated caller from the Authorization header."""
    return authenticate(credentials.credentials if credentials else None)


async def require_admin(
    identity: Identity = Depends(get_identity),
) -> Identity:
    return authorize(identity, Role.ADMIN)

