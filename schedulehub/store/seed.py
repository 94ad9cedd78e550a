"""Demo data seeding for an empty store."""

import logging

from schedulehub.auth.service import hash_password, normalize_email
from schedulehub.exceptions import AppError, ValidationError
from schedulehub.schedules.service import validate_schedule
from schedulehub.schemas import Role, ScheduleFields, ScheduleRequest
from schedulehub.store.base import Store

logger = logging.getLogger(__name__)

# Stand-in owner while validating; replaced by the real id on insert
_PENDING_OWNER = 1


def _check_seed(seed: dict) -> list[tuple[dict, list[ScheduleFields]]]:
    """Validate every seed item before anything is written.

    Returns (account fields, schedule fields) pairs. Raises ValidationError
    naming the offending entry.
    """
    people = seed.get("staff") or []
    if not isinstance(people, list):
        raise ValidationError("Seed 'staff' must be a list")

    checked = []
    seen_emails = set()
    for index, person in enumerate(people, start=1):
        if not isinstance(person, dict):
            raise ValidationError(f"Seed staff #{index} must be a mapping")
        name = str(person.get("name") or "").strip()
        email = normalize_email(str(person.get("email") or ""))
        if not name or not email:
            raise ValidationError(f"Seed staff #{index} needs a name and an email")
        if email in seen_emails:
            raise ValidationError(f"Seed staff #{index} repeats email {email}")
        seen_emails.add(email)
        try:
            role = Role(person.get("role", Role.STAFF.value))
        except ValueError:
            raise ValidationError(f"Seed staff #{index} has an invalid role")

        schedules = []
        for item in person.get("schedules") or []:
            if not isinstance(item, dict):
                raise ValidationError(f"Seed staff #{index} has a malformed schedule")
            try:
                request = ScheduleRequest(**{**item, "staff_id": _PENDING_OWNER})
            except ValueError:
                # pydantic's ValidationError is a ValueError
                raise ValidationError(f"Seed staff #{index} has a malformed schedule")
            try:
                schedules.append(validate_schedule(request))
            except ValidationError as exc:
                raise ValidationError(f"Seed staff #{index}: {exc.message}") from exc

        account = {
            "name": name,
            "email": email,
            "role": role,
            "password": person.get("password"),
        }
        checked.append((account, schedules))
    return checked


async def seed_store(store: Store, seed: dict) -> bool:
    """Insert seed staff and their schedules when no staff exists yet.

    The whole seed is validated up front. If an insert still fails, accounts
    created so far are deleted again (their schedules go by cascade) so the
    next start retries from an empty store. Returns True if anything was
    inserted.
    """
    if await store.staff.count() > 0:
        return False

    checked = _check_seed(seed)
    created: list[int] = []
    try:
        for account, schedules in checked:
            staff_id = await store.staff.create(
                name=account["name"],
                email=account["email"],
                role=account["role"],
                password_hash=hash_password(account["password"]) if account["password"] else None,
            )
            created.append(staff_id)
            for fields in schedules:
                await store.schedules.create(fields.model_copy(update={"staff_id": staff_id}))
    except AppError:
        logger.error("Seeding failed after %d accounts, removing them", len(created))
        for staff_id in reversed(created):
            await store.staff.delete(staff_id)
        raise

    logger.info("Store seeded with %d staff accounts", len(checked))
    return bool(checked)
