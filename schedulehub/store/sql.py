"""SQL store: staff and schedule repositories on an async SQLAlchemy session."""

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from schedulehub.exceptions import DuplicateEmail, NotFound, StoreError
from schedulehub.models import ScheduleRow, StaffRow
from schedulehub.schemas import Role, ScheduleEntry, ScheduleFields, StaffAccount
from schedulehub.store.base import Store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _store_errors(session: AsyncSession, action: str) -> AsyncIterator[None]:
    """Roll back and convert unexpected SQLAlchemy failures into StoreError."""
    try:
        yield
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("SQL store failure during %s", action)
        raise StoreError() from exc


def _to_account(row: StaffRow) -> StaffAccount:
    return StaffAccount(
        id=row.id,
        name=row.name,
        email=row.email,
        role=Role(row.role),
        password_hash=row.password_hash,
        external_identity_id=row.google_id,
        created_at=row.created_at,
    )


def _to_entry(row: ScheduleRow, staff_name: str | None, staff_email: str | None) -> ScheduleEntry:
    return ScheduleEntry(
        id=row.id,
        staff_id=row.staff_id,
        title=row.title,
        description=row.description or "",
        date=row.date,
        start_time=row.start_time,
        end_time=row.end_time,
        location=row.location or "",
        status=row.status,
        created_at=row.created_at,
        staff_name=staff_name,
        staff_email=staff_email,
    )


class SQLStaffRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def _get_one(self, *filters) -> StaffAccount | None:
        async with _store_errors(self._session, "staff lookup"):
            result = await self._session.execute(
                select(StaffRow).where(*filters).execution_options(populate_existing=True)
            )
            row = result.scalars().one_or_none()
        return _to_account(row) if row is not None else None

    async def get_by_id(self, staff_id: int) -> StaffAccount | None:
        return await self._get_one(StaffRow.id == staff_id)

    async def get_by_email(self, email: str) -> StaffAccount | None:
        return await self._get_one(StaffRow.email == email)

    async def get_by_external_id(self, external_id: str) -> StaffAccount | None:
        return await self._get_one(StaffRow.google_id == external_id)

    async def list_all(self) -> Sequence[StaffAccount]:
        async with _store_errors(self._session, "staff list"):
            result = await self._session.execute(
                select(StaffRow).order_by(StaffRow.id).execution_options(populate_existing=True)
            )
            rows = result.scalars().all()
        return [_to_account(r) for r in rows]

    async def count(self) -> int:
        async with _store_errors(self._session, "staff count"):
            result = await self._session.execute(select(func.count()).select_from(StaffRow))
            return int(result.scalar_one())

    async def create(
        self,
        *,
        name: str,
        email: str,
        role: Role,
        password_hash: str | None = None,
        external_identity_id: str | None = None,
    ) -> int:
        row = StaffRow(
            name=name,
            email=email,
            role=Role(role).value,
            password_hash=password_hash,
            google_id=external_identity_id,
        )
        async with _store_errors(self._session, "staff create"):
            try:
                self._session.add(row)
                await self._session.flush()
                await self._session.commit()
            except IntegrityError as exc:
                await self._session.rollback()
                logger.info("Staff insert rejected, email already present: %s", email)
                raise DuplicateEmail() from exc
        return int(row.id)

    async def link_external_id(self, staff_id: int, external_id: str) -> None:
        async with _store_errors(self._session, "staff link"):
            try:
                result = await self._session.execute(
                    update(StaffRow).where(StaffRow.id == staff_id).values(google_id=external_id)
                )
                matched = result.rowcount
                await self._session.commit()
            except IntegrityError as exc:
                await self._session.rollback()
                raise DuplicateEmail("External identity already linked") from exc
        if matched == 0:
            raise NotFound("Staff member not found")

    async def update_password(self, staff_id: int, password_hash: str) -> None:
        async with _store_errors(self._session, "password update"):
            result = await self._session.execute(
                update(StaffRow).where(StaffRow.id == staff_id).values(password_hash=password_hash)
            )
            matched = result.rowcount
            await self._session.commit()
        if matched == 0:
            raise NotFound("Staff member not found")

    async def delete(self, staff_id: int) -> None:
        async with _store_errors(self._session, "staff delete"):
            result = await self._session.execute(delete(StaffRow).where(StaffRow.id == staff_id))
            matched = result.rowcount
            await self._session.commit()
        if matched == 0:
            raise NotFound("Staff member not found")


class SQLScheduleRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def _list(self, *filters) -> Sequence[ScheduleEntry]:
        stmt = (
            select(ScheduleRow, StaffRow.name, StaffRow.email)
            .join(StaffRow, StaffRow.id == ScheduleRow.staff_id)
            .where(*filters)
            .order_by(ScheduleRow.date.asc(), ScheduleRow.start_time.asc(), ScheduleRow.id.asc())
            .execution_options(populate_existing=True)
        )
        async with _store_errors(self._session, "schedule list"):
            result = await self._session.execute(stmt)
            rows = result.all()
        return [_to_entry(r[0], r[1], r[2]) for r in rows]

    async def list_for_staff(self, staff_id: int) -> Sequence[ScheduleEntry]:
        return await self._list(ScheduleRow.staff_id == staff_id)

    async def list_all(self) -> Sequence[ScheduleEntry]:
        return await self._list()

    async def create(self, fields: ScheduleFields) -> int:
        row = ScheduleRow(**fields.model_dump(mode="json"))
        async with _store_errors(self._session, "schedule create"):
            try:
                self._session.add(row)
                await self._session.flush()
                await self._session.commit()
            except IntegrityError as exc:
                await self._session.rollback()
                raise NotFound("Staff member not found") from exc
        return int(row.id)

    async def update(self, schedule_id: int, fields: ScheduleFields) -> None:
        async with _store_errors(self._session, "schedule update"):
            try:
                result = await self._session.execute(
                    update(ScheduleRow)
                    .where(ScheduleRow.id == schedule_id)
                    .values(**fields.model_dump(mode="json"))
                )
                matched = result.rowcount
                await self._session.commit()
            except IntegrityError as exc:
                await self._session.rollback()
                raise NotFound("Staff member not found") from exc
        if matched == 0:
            raise NotFound("Schedule not found")

    async def delete(self, schedule_id: int) -> None:
        async with _store_errors(self._session, "schedule delete"):
            result = await self._session.execute(
                delete(ScheduleRow).where(ScheduleRow.id == schedule_id)
            )
            matched = result.rowcount
            await self._session.commit()
        if matched == 0:
            raise NotFound("Schedule not found")


def build_sql_store(session: AsyncSession) -> Store:
    return Store(staff=SQLStaffRepository(session), schedules=SQLScheduleRepository(session))
