import pytest
import yaml
from fastapi.testclient import TestClient

import schedulehub.main as main_module
from schedulehub.auth.service import login
from schedulehub.config import load_seed_data
from schedulehub.exceptions import StoreError, ValidationError
from schedulehub.schemas import Role
from schedulehub.store.seed import seed_store
from tests.fakes import InMemoryStaffRepository, in_memory_store


def person(name: str, email: str, **extra) -> dict:
    return {"name": name, "email": email, "password": "staff123", "role": "staff", **extra}


class FailingOnSecondCreate(InMemoryStaffRepository):
    """Staff repository whose second insert fails like a store outage."""

    def __init__(self) -> None:
        super().__init__()
        self.fail = True

    async def create(self, **kwargs) -> int:
        if self.fail and await self.count() == 1:
            raise StoreError()
        return await super().create(**kwargs)


async def test_seed_file_populates_empty_store(store):
    assert await seed_store(store, load_seed_data()) is True

    accounts = await store.staff.list_all()
    assert [(a.email, a.role) for a in accounts] == [
        ("admin@schedule.com", Role.ADMIN),
        ("john@schedule.com", Role.STAFF),
        ("jane@schedule.com", Role.STAFF),
    ]
    john = accounts[1]
    assert [e.title for e in await store.schedules.list_for_staff(john.id)] == [
        "Morning Shift",
        "Safety Training",
    ]
    assert len(await store.schedules.list_all()) == 4


async def test_seeded_accounts_can_log_in(store):
    await seed_store(store, load_seed_data())

    _, admin = await login(store.staff, "admin@schedule.com", "admin123")
    _, john = await login(store.staff, "john@schedule.com", "staff123")

    assert admin.role == Role.ADMIN
    assert john.name == "John Doe"


async def test_seed_skips_store_with_staff(store, john):
    assert await seed_store(store, load_seed_data()) is False

    assert await store.staff.count() == 1
    assert await store.schedules.list_all() == []


@pytest.mark.parametrize("seed", [
    {"staff": [person("Amy", "amy@x.com", schedules=[{"title": "no date"}])]},
    {"staff": [person("Amy", "amy@x.com", schedules=[{"title": "Early", "date": "2025-12-06",
                                                      "start_time": "8am", "end_time": "16:00"}])]},
    {"staff": [person("Amy", "amy@x.com"), {"email": "nameless@x.com"}]},
    {"staff": [person("Amy", "amy@x.com", role="owner")]},
    {"staff": [person("Amy", "amy@x.com"), person("Bob", "bob@x.com"), person("Amy Again", "AMY@x.com")]},
    {"staff": "not a list"},
])
async def test_malformed_seed_writes_nothing(store, seed):
    with pytest.raises(ValidationError):
        await seed_store(store, seed)

    assert await store.staff.count() == 0
    assert await store.schedules.list_all() == []


async def test_failed_insert_removes_partial_seed_and_retry_completes():
    staff = FailingOnSecondCreate()
    store = in_memory_store(staff)
    shift = {"title": "Morning Shift", "date": "2025-12-06", "start_time": "08:00", "end_time": "16:00"}
    seed = {"staff": [person("Amy", "amy@x.com", schedules=[shift]), person("Bob", "bob@x.com"),
                      person("Cal", "cal@x.com")]}

    with pytest.raises(StoreError):
        await seed_store(store, seed)

    assert await staff.count() == 0

    staff.fail = False
    assert await seed_store(store, seed) is True
    assert [a.email for a in await staff.list_all()] == ["amy@x.com", "bob@x.com", "cal@x.com"]
    [entry] = await store.schedules.list_all()
    assert entry.staff_email == "amy@x.com"


@pytest.mark.parametrize("failure", [
    ValidationError("Seed staff #1 needs a name and an email"),
    yaml.YAMLError("mapping values are not allowed here"),
])
def test_app_starts_when_seeding_fails(monkeypatch, failure):
    def broken_seed(path=None):
        raise failure

    monkeypatch.setattr(main_module.settings, "SEED_DEMO_DATA", True)
    monkeypatch.setattr(main_module, "load_seed_data", broken_seed)

    with TestClient(main_module.app) as client:
        assert client.get("/health").json() == {"status": "healthy", "store": "sql"}


def test_run_serves_app_with_uvicorn(monkeypatch):
    calls = []
    monkeypatch.setattr(main_module.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    main_module.run()

    assert calls == [("schedulehub.main:app", {"host": main_module.settings.HOST, "port": main_module.settings.PORT})]
