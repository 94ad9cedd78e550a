from datetime import datetime, timedelta, timezone

import jwt
import pytest

from schedulehub.auth.guard import authenticate, authorize
from schedulehub.auth.jwt_handler import ALGORITHM, create_token
from schedulehub.exceptions import Forbidden, Unauthenticated
from schedulehub.schemas import Identity, Role


def test_authenticate_returns_identity_from_token():
    token = create_token(staff_id=3, email="jane@schedule.com", role="staff")

    identity = authenticate(token)

    assert identity == Identity(staff_id=3, email="jane@schedule.com", role=Role.STAFF)


def test_authenticate_without_token():
    with pytest.raises(Unauthenticated) as exc_info:
        authenticate(None)

    assert exc_info.value.status_code == 401


def test_authenticate_expired_token():
    issued = datetime.now(timezone.utc) - timedelta(days=2)
    token = create_token(staff_id=3, email="jane@schedule.com", role="staff", issued_at=issued)

    with pytest.raises(Unauthenticated):
        authenticate(token)


def test_authenticate_unknown_role_claim():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "3", "email": "jane@schedule.com", "role": "owner", "iat": now, "exp": now + timedelta(hours=1)},
        "test-secret",
        algorithm=ALGORITHM,
    )

    with pytest.raises(Unauthenticated):
        authenticate(token)


def test_authenticate_non_numeric_subject():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "jane", "email": "jane@schedule.com", "role": "staff", "iat": now, "exp": now + timedelta(hours=1)},
        "test-secret",
        algorithm=ALGORITHM,
    )

    with pytest.raises(Unauthenticated):
        authenticate(token)


def test_authorize_admin_passes_every_requirement():
    admin = Identity(staff_id=1, email="admin@schedule.com", role=Role.ADMIN)

    assert authorize(admin, Role.ADMIN) is admin
    assert authorize(admin, Role.STAFF) is admin


def test_authorize_staff_cannot_act_as_admin():
    staff = Identity(staff_id=2, email="john@schedule.com", role=Role.STAFF)

    assert authorize(staff, Role.STAFF) is staff
    with pytest.raises(Forbidden) as exc_info:
        authorize(staff, Role.ADMIN)

    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "Admin access required"
