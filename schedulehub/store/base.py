"""Storage interfaces shared by the SQL and hosted backends."""

from dataclasses import dataclass
from typing import Protocol, Sequence

from schedulehub.schemas import Role, ScheduleEntry, ScheduleFields, StaffAccount


class StaffRepository(Protocol):
    async def get_by_id(self, staff_id: int) -> StaffAccount | None:
        raise NotImplementedError

    async def get_by_email(self, email: str) -> StaffAccount | None:
        raise NotImplementedError

    async def get_by_external_id(self, external_id: str) -> StaffAccount | None:
        raise NotImplementedError

    async def list_all(self) -> Sequence[StaffAccount]:
        raise NotImplementedError

    async def count(self) -> int:
        raise NotImplementedError

    async def create(
        self,
        *,
        name: str,
        email: str,
        role: Role,
        password_hash: str | None = None,
        external_identity_id: str | None = None,
    ) -> int:
        """Insert an account and return its id.

        Raises DuplicateEmail when the email (or external id) is taken.
        """

        raise NotImplementedError

    async def link_external_id(self, staff_id: int, external_id: str) -> None:
        raise NotImplementedError

    async def update_password(self, staff_id: int, password_hash: str) -> None:
        raise NotImplementedError

    async def delete(self, staff_id: int) -> None:
        """Delete an account and, by cascade, its schedules. Raises NotFound."""

        raise NotImplementedError


class ScheduleRepository(Protocol):
    async def list_for_staff(self, staff_id: int) -> Sequence[ScheduleEntry]:
        """Entries owned by staff_id ordered by (date, start_time)."""

        raise NotImplementedError

    async def list_all(self) -> Sequence[ScheduleEntry]:
        """Every entry joined with its owner's name/email, same ordering."""

        raise NotImplementedError

    async def create(self, fields: ScheduleFields) -> int:
        """Insert an entry. Raises NotFound when staff_id is unknown."""

        raise NotImplementedError

    async def update(self, schedule_id: int, fields: ScheduleFields) -> None:
        """Overwrite every mutable field. Raises NotFound when nothing matched."""

        raise NotImplementedError

    async def delete(self, schedule_id: int) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class Store:
    staff: StaffRepository
    schedules: ScheduleRepository
