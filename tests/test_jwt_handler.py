from datetime import datetime, timedelta, timezone

import jwt
import pytest

from schedulehub.auth.jwt_handler import ALGORITHM, create_token, verify_token


def test_token_round_trip_carries_identity_claims():
    token = create_token(staff_id=2, email="john@schedule.com", role="staff")

    payload = verify_token(token)

    assert payload["sub"] == "2"
    assert payload["email"] == "john@schedule.com"
    assert payload["role"] == "staff"
    assert payload["exp"] - payload["iat"] == 24 * 3600


def test_token_expires_after_24_hours():
    issued = datetime.now(timezone.utc) - timedelta(hours=25)
    token = create_token(staff_id=2, email="john@schedule.com", role="staff", issued_at=issued)

    with pytest.raises(jwt.ExpiredSignatureError):
        verify_token(token)


def test_token_still_valid_just_before_expiry():
    issued = datetime.now(timezone.utc) - timedelta(hours=23, minutes=59)
    token = create_token(staff_id=2, email="john@schedule.com", role="staff", issued_at=issued)

    assert verify_token(token)["sub"] == "2"


def test_token_signed_with_other_secret_is_rejected():
    token = create_token(staff_id=1, email="admin@schedule.com", role="admin", secret="not-the-server-secret")

    with pytest.raises(jwt.InvalidSignatureError):
        verify_token(token)


def test_tampered_payload_is_rejected():
    token = create_token(staff_id=2, email="john@schedule.com", role="staff")
    header, _, signature = token.split(".")
    forged = jwt.encode(
        {"sub": "2", "email": "john@schedule.com", "role": "admin",
         "iat": datetime.now(timezone.utc), "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        "attacker",
        algorithm=ALGORITHM,
    ).split(".")[1]

    with pytest.raises(jwt.InvalidSignatureError):
        verify_token(f"{header}.{forged}.{signature}")


def test_token_missing_role_claim_is_rejected():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "2", "email": "john@schedule.com", "iat": now, "exp": now + timedelta(hours=1)},
        "test-secret",
        algorithm=ALGORITHM,
    )

    with pytest.raises(jwt.MissingRequiredClaimError):
        verify_token(token)


def test_garbage_token_is_rejected():
    with pytest.raises(jwt.DecodeError):
        verify_token("not.a.token")
