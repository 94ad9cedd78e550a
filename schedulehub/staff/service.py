"""Staff account management (admin only)."""

import logging
from collections.abc import Sequence

from schedulehub.auth.guard import authorize
from schedulehub.auth.service import hash_password, normalize_email
from schedulehub.events.notifier import STAFF_CREATED, STAFF_DELETED, Publisher, publish_safely
from schedulehub.exceptions import ValidationError
from schedulehub.schemas import Identity, Role, StaffAccount, StaffCreateRequest
from schedulehub.store.base import Store

logger = logging.getLogger(__name__)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


async def list_staff(store: Store, identity: Identity) -> Sequence[StaffAccount]:
    authorize(identity, Role.ADMIN)
    return await store.staff.list_all()


async def create_staff(
    store: Store, identity: Identity, data: StaffCreateRequest, publish: Publisher
) -> int:
    """Create a password account. Raises ValidationError or DuplicateEmail."""
    authorize(identity, Role.ADMIN)

    if any(_is_blank(v) for v in (data.name, data.email, data.password, data.role)):
        raise ValidationError("Missing required fields")
    if data.role not in (Role.ADMIN.value, Role.STAFF.value):
        raise ValidationError("Invalid role")

    email = normalize_email(data.email)
    staff_id = await store.staff.create(
        name=data.name.strip(),
        email=email,
        role=Role(data.role),
        password_hash=hash_password(data.password),
    )
    logger.info("Staff account %s created (id=%d, role=%s) by %s", email, staff_id, data.role, identity.email)
    publish_safely(publish, STAFF_CREATED, {"id": staff_id})
    return staff_id


async def delete_staff(
    store: Store, identity: Identity, staff_id: int, publish: Publisher
) -> None:
    """Delete an account; its schedules go with it."""
    authorize(identity, Role.ADMIN)
    if staff_id == identity.staff_id:
        raise ValidationError("You cannot delete your own account")

    await store.staff.delete(staff_id)
    logger.info("Staff account id=%d deleted by %s", staff_id, identity.email)
    publish_safely(publish, STAFF_DELETED, {"id": staff_id})
