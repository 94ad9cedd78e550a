"""Shared helpers for building accounts, identities and auth headers in tests."""

from schedulehub.auth.jwt_handler import create_token
from schedulehub.auth.service import hash_password
from schedulehub.schemas import Identity, Role, ScheduleRequest, StaffAccount
from schedulehub.store.base import Store

ADMIN_PASSWORD = "admin123"
STAFF_PASSWORD = "staff123"


async def create_account(store: Store, name: str, email: str, role: Role, password: str) -> StaffAccount:
    staff_id = await store.staff.create(
        name=name, email=email, role=role, password_hash=hash_password(password)
    )
    return await store.staff.get_by_id(staff_id)


def identity_of(account: StaffAccount) -> Identity:
    return Identity(staff_id=account.id, email=account.email, role=account.role)


def auth_header(account: StaffAccount) -> dict[str, str]:
    token = create_token(staff_id=account.id, email=account.email, role=account.role.value)
    return {"Authorization": f"Bearer {token}"}


def shift(staff_id: int, /, **overrides) -> ScheduleRequest:
    data = {
        "staff_id": staff_id,
        "title": "Morning Shift",
        "date": "2025-12-06",
        "start_time": "08:00",
        "end_time": "16:00",
    }
    data.update(overrides)
    return ScheduleRequest(**data)
