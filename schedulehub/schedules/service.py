"""Schedule business logic: validation, scoping and change events."""

import logging
from collections.abc import Sequence
from datetime import datetime

from schedulehub.auth.guard import authorize
from schedulehub.events.notifier import (
    SCHEDULE_CREATED,
    SCHEDULE_DELETED,
    SCHEDULE_UPDATED,
    Publisher,
    publish_safely,
)
from schedulehub.exceptions import ValidationError
from schedulehub.schemas import Identity, Role, ScheduleEntry, ScheduleFields, ScheduleRequest, ScheduleStatus
from schedulehub.store.base import Store

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("staff_id", "title", "date", "start_time", "end_time")
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMATS = ("%H:%M", "%H:%M:%S")


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_time(field: str, value: str) -> str:
    for fmt in TIME_FORMATS:
        try:
            datetime.strptime(value, fmt)
            return value
        except ValueError:
            continue
    raise ValidationError(f"Invalid {field}, expected HH:MM")


def validate_schedule(data: ScheduleRequest) -> ScheduleFields:
    """Check required fields and formats, apply defaults.

    end_time may be earlier than start_time (overnight shifts). Any status
    value from the enum is accepted regardless of the current one.
    """
    missing = [f for f in REQUIRED_FIELDS if _is_blank(getattr(data, f))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    if data.staff_id <= 0:
        raise ValidationError("Invalid staff_id")

    date = data.date.strip()
    try:
        datetime.strptime(date, DATE_FORMAT)
    except ValueError:
        raise ValidationError("Invalid date, expected YYYY-MM-DD")

    start_time = _check_time("start_time", data.start_time.strip())
    end_time = _check_time("end_time", data.end_time.strip())

    status = data.status or ScheduleStatus.SCHEDULED.value
    try:
        status = ScheduleStatus(status)
    except ValueError:
        raise ValidationError("Invalid status")

    return ScheduleFields(
        staff_id=data.staff_id,
        title=data.title.strip(),
        description=data.description or "",
        date=date,
        start_time=start_time,
        end_time=end_time,
        location=data.location or "",
        status=status,
    )


async def list_mine(store: Store, identity: Identity) -> Sequence[ScheduleEntry]:
    """The caller's own entries; admins get only their own here too."""
    return await store.schedules.list_for_staff(identity.staff_id)


async def list_all(store: Store, identity: Identity) -> Sequence[ScheduleEntry]:
    authorize(identity, Role.ADMIN)
    return await store.schedules.list_all()


async def list_visible(store: Store, identity: Identity) -> Sequence[ScheduleEntry]:
    """Everything for admins, own entries for staff."""
    if identity.role == Role.ADMIN:
        return await store.schedules.list_all()
    return await store.schedules.list_for_staff(identity.staff_id)


async def create_schedule(
    store: Store, identity: Identity, data: ScheduleRequest, publish: Publisher
) -> int:
    authorize(identity, Role.ADMIN)
    fields = validate_schedule(data)
    schedule_id = await store.schedules.create(fields)
    logger.info(
        "Schedule %d created for staff id=%d by %s", schedule_id, fields.staff_id, identity.email
    )
    publish_safely(publish, SCHEDULE_CREATED, {"id": schedule_id})
    return schedule_id


async def update_schedule(
    store: Store, identity: Identity, schedule_id: int, data: ScheduleRequest, publish: Publisher
) -> None:
    """Full overwrite of every mutable field."""
    authorize(identity, Role.ADMIN)
    fields = validate_schedule(data)
    await store.schedules.update(schedule_id, fields)
    logger.info("Schedule %d updated by %s", schedule_id, identity.email)
    publish_safely(publish, SCHEDULE_UPDATED, {"id": schedule_id})


async def delete_schedule(
    store: Store, identity: Identity, schedule_id: int, publish: Publisher
) -> None:
    authorize(identity, Role.ADMIN)
    await store.schedules.delete(schedule_id)
    logger.info("Schedule %d deleted by %s", schedule_id, identity.email)
    publish_safely(publish, SCHEDULE_DELETED, {"id": schedule_id})
