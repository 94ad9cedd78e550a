import pytest

from schedulehub.auth import service
from schedulehub.auth.jwt_handler import verify_token
from schedulehub.exceptions import InvalidCredentials
from schedulehub.schemas import Role
from tests.fakes import RacingStaffRepository
from tests.helpers import ADMIN_PASSWORD, STAFF_PASSWORD


async def test_login_returns_token_for_account(store, admin):
    token, account = await service.login(store.staff, "admin@schedule.com", ADMIN_PASSWORD)

    assert account.id == admin.id
    assert account.role == Role.ADMIN
    payload = verify_token(token)
    assert payload["sub"] == str(admin.id)
    assert payload["role"] == "admin"


async def test_login_email_is_case_insensitive(store, john):
    _, account = await service.login(store.staff, "  John@Schedule.COM ", STAFF_PASSWORD)

    assert account.id == john.id


async def test_login_wrong_password(store, john):
    with pytest.raises(InvalidCredentials):
        await service.login(store.staff, "john@schedule.com", "wrong-password")


async def test_login_unknown_email(store, john):
    with pytest.raises(InvalidCredentials) as exc_info:
        await service.login(store.staff, "nobody@schedule.com", STAFF_PASSWORD)

    assert exc_info.value.status_code == 401


async def test_login_account_without_password(store):
    await store.staff.create(name="Sam", email="sam@schedule.com", role=Role.STAFF, external_identity_id="g-1")

    with pytest.raises(InvalidCredentials):
        await service.login(store.staff, "sam@schedule.com", "")


def test_password_hash_is_salted():
    first = service.hash_password("staff123")
    second = service.hash_password("staff123")

    assert first != second
    assert "staff123" not in first
    assert service.verify_password("staff123", first)
    assert service.verify_password("staff123", second)


def test_verify_password_with_malformed_hash():
    assert service.verify_password("staff123", "not-a-bcrypt-hash") is False


async def test_external_authenticate_creates_account(store):
    account = await service.external_authenticate(store.staff, "g-100", "New.Person@Gmail.com", "New Person")

    assert account.email == "new.person@gmail.com"
    assert account.name == "New Person"
    assert account.role == Role.STAFF
    assert account.password_hash is None
    assert account.external_identity_id == "g-100"
    assert await store.staff.count() == 1


async def test_external_authenticate_links_existing_email(store, john):
    account = await service.external_authenticate(store.staff, "g-200", "john@schedule.com", "Johnny")

    assert account.id == john.id
    assert account.name == "John Doe"
    stored = await store.staff.get_by_id(john.id)
    assert stored.external_identity_id == "g-200"
    assert await store.staff.count() == 1


async def test_external_authenticate_prefers_linked_id(store, john):
    await store.staff.link_external_id(john.id, "g-300")

    account = await service.external_authenticate(store.staff, "g-300", "other@gmail.com", "Other")

    assert account.id == john.id
    assert await store.staff.get_by_email("other@gmail.com") is None


async def test_external_authenticate_is_idempotent(store):
    first = await service.external_authenticate(store.staff, "g-400", "kim@gmail.com", "Kim")
    second = await service.external_authenticate(store.staff, "g-400", "kim@gmail.com", "Kim")

    assert first.id == second.id
    assert await store.staff.count() == 1


async def test_external_authenticate_loses_create_race():
    staff = RacingStaffRepository("Kim", "kim@gmail.com")

    account = await service.external_authenticate(staff, "g-500", "kim@gmail.com", "Kim")

    assert staff.create_calls == 1
    assert account.email == "kim@gmail.com"
    assert account.external_identity_id == "g-500"
    assert await staff.count() == 1


async def test_change_password(store, john):
    await service.change_password(store.staff, john.id, "new-secret-1")

    _, account = await service.login(store.staff, "john@schedule.com", "new-secret-1")
    assert account.id == john.id
    with pytest.raises(InvalidCredentials):
        await service.login(store.staff, "john@schedule.com", STAFF_PASSWORD)
