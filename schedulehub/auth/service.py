"""Core authentication business logic: password login and external identity."""

import logging

from passlib.hash import bcrypt

from schedulehub.auth.jwt_handler import create_token
from schedulehub.exceptions import DuplicateEmail, InvalidCredentials, StoreError
from schedulehub.schemas import Role, StaffAccount
from schedulehub.store.base import StaffRepository

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Normalize email to lowercase, stripped of whitespace."""
    return email.lower().strip()


def hash_password(password: str) -> str:
    """Salted, irreversible bcrypt hash."""
    return bcrypt.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.verify(password, password_hash)
    except ValueError:
        # Malformed stored hash
        logger.warning("Stored password hash could not be parsed")
        return False


# Dummy bcrypt hash for constant-time comparison on unknown users
_DUMMY_HASH = bcrypt.hash("__dummy__")


def issue_token(account: StaffAccount) -> str:
    return create_token(staff_id=account.id, email=account.email, role=account.role.value)


async def login(staff: StaffRepository, email: str, password: str) -> tuple[str, StaffAccount]:
    """Password login.

    Returns (token, account). Raises InvalidCredentials for an unknown email,
    an account without a password, or a wrong password.
    """
    email = normalize_email(email)

    account = await staff.get_by_email(email)
    if account is None or not account.password_hash:
        # Constant-time: still run bcrypt to prevent timing-based user enumeration
        verify_password(password, _DUMMY_HASH)
        logger.warning("Login failed: unknown or passwordless account email=%s", email)
        raise InvalidCredentials()

    if not verify_password(password, account.password_hash):
        logger.warning("Login failed: wrong password for email=%s", email)
        raise InvalidCredentials()

    logger.info("Login succeeded for %s (role=%s)", email, account.role.value)
    return issue_token(account), account


async def external_authenticate(
    staff: StaffRepository, external_id: str, email: str, display_name: str
) -> StaffAccount:
    """Resolve a provider-asserted identity to a staff account.

    Lookup order: external id → email (link the external id) → create a new
    staff account without password. A concurrent request that creates the
    same email first is treated as "already linked".
    """
    email = normalize_email(email)

    account = await staff.get_by_external_id(external_id)
    if account is not None:
        return account

    account = await staff.get_by_email(email)
    if account is not None:
        return await _link(staff, account, external_id)

    try:
        new_id = await staff.create(
            name=display_name or email,
            email=email,
            role=Role.STAFF,
            external_identity_id=external_id,
        )
    except DuplicateEmail:
        # Lost the race against another request for the same email or id
        account = await staff.get_by_external_id(external_id) or await staff.get_by_email(email)
        if account is None:
            raise StoreError()
        return await _link(staff, account, external_id)

    logger.info("Account created from external identity for %s", email)
    created = await staff.get_by_id(new_id)
    if created is None:
        raise StoreError()
    return created


async def _link(staff: StaffRepository, account: StaffAccount, external_id: str) -> StaffAccount:
    if account.external_identity_id == external_id:
        return account
    try:
        await staff.link_external_id(account.id, external_id)
    except DuplicateEmail:
        # The same external id was linked concurrently; re-read whatever won
        linked = await staff.get_by_external_id(external_id)
        if linked is None:
            raise
        return linked
    logger.info("External identity linked to existing account %s", account.email)
    return account.model_copy(update={"external_identity_id": external_id})


async def change_password(
    staff: StaffRepository, staff_id: int, new_password: str
) -> None:
    """Replace the password hash of an existing account (admin tooling)."""
    await staff.update_password(staff_id, hash_password(new_password))
    logger.info("Password changed for staff id=%d", staff_id)
