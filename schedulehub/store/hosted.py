"""Hosted store: staff and schedule repositories over a PostgREST-style REST API.

The hosted database exposes each table at ``<base>/<table>``; filters are
query parameters such as ``email=eq.john@schedule.com`` and writes ask for
``Prefer: return=representation`` so affected rows come back in the body.
"""

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from schedulehub.exceptions import DuplicateEmail, NotFound, StoreError
from schedulehub.schemas import Role, ScheduleEntry, ScheduleFields, StaffAccount
from schedulehub.store.base import Store

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"

RETURN_REPRESENTATION = {"Prefer": "return=representation"}
STAFF_COLUMNS = "id,name,email,password_hash,google_id,role,created_at"
SCHEDULE_SELECT = "*,staff:staff_id(name,email)"
SCHEDULE_ORDER = "date.asc,start_time.asc,id.asc"


def create_hosted_client(base_url: str, api_key: str, timeout: float = 10) -> httpx.AsyncClient:
    """Build the shared client used by every hosted repository."""
    return httpx.AsyncClient(
        base_url=base_url,
        headers={
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        },
        timeout=timeout,
    )


class HostedAPIError(Exception):
    """Non-2xx response from the hosted API, carrying its error code."""

    def __init__(self, status_code: int, code: str, message: str):
        self.status_code = status_code
        self.code = code
        super().__init__(f"{status_code} {code}: {message}")


class _HostedTable:
    def __init__(self, client: httpx.AsyncClient, table: str):
        self._client = client
        self._table = table

    async def request(
        self,
        method: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
        action: str,
    ) -> list[dict]:
        """Send one request; returns the decoded row list.

        Raises HostedAPIError for error responses, StoreError for transport
        failures and undecodable bodies.
        """
        try:
            resp = await self._client.request(
                method, f"/{self._table}", params=params, json=json, headers=headers
            )
        except httpx.HTTPError as exc:
            logger.exception("Hosted store transport failure during %s", action)
            raise StoreError() from exc

        if not resp.is_success:
            try:
                body = resp.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            raise HostedAPIError(
                resp.status_code, str(body.get("code", "")), str(body.get("message", resp.text))
            )

        if not resp.content:
            return []
        try:
            data = resp.json()
        except ValueError as exc:
            logger.exception("Hosted store returned a non-JSON body during %s", action)
            raise StoreError() from exc
        return data if isinstance(data, list) else [data]


def _unexpected(exc: HostedAPIError, action: str) -> StoreError:
    logger.error("Hosted store failure during %s: %s", action, exc)
    return StoreError()


def _to_account(row: dict) -> StaffAccount:
    return StaffAccount(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        role=Role(row["role"]),
        password_hash=row.get("password_hash"),
        external_identity_id=row.get("google_id"),
        created_at=row.get("created_at"),
    )


def _to_entry(row: dict) -> ScheduleEntry:
    owner = row.get("staff") or {}
    return ScheduleEntry(
        id=row["id"],
        staff_id=row["staff_id"],
        title=row["title"],
        description=row.get("description") or "",
        date=row["date"],
        start_time=row["start_time"],
        end_time=row["end_time"],
        location=row.get("location") or "",
        status=row.get("status") or "scheduled",
        created_at=row.get("created_at"),
        staff_name=owner.get("name"),
        staff_email=owner.get("email"),
    )


class HostedStaffRepository:
    def __init__(self, client: httpx.AsyncClient):
        self._table = _HostedTable(client, "staff")

    async def _get_one(self, column: str, value: str, action: str) -> StaffAccount | None:
        try:
            rows = await self._table.request(
                "GET",
                params={"select": STAFF_COLUMNS, column: f"eq.{value}", "limit": "1"},
                action=action,
            )
        except HostedAPIError as exc:
            raise _unexpected(exc, action) from exc
        return _to_account(rows[0]) if rows else None

    async def get_by_id(self, staff_id: int) -> StaffAccount | None:
        return await self._get_one("id", str(staff_id), "staff lookup")

    async def get_by_email(self, email: str) -> StaffAccount | None:
        return await self._get_one("email", email, "staff lookup")

    async def get_by_external_id(self, external_id: str) -> StaffAccount | None:
        return await self._get_one("google_id", external_id, "staff lookup")

    async def list_all(self) -> Sequence[StaffAccount]:
        try:
            rows = await self._table.request(
                "GET", params={"select": STAFF_COLUMNS, "order": "id.asc"}, action="staff list"
            )
        except HostedAPIError as exc:
            raise _unexpected(exc, "staff list") from exc
        return [_to_account(r) for r in rows]

    async def count(self) -> int:
        try:
            rows = await self._table.request("GET", params={"select": "id"}, action="staff count")
        except HostedAPIError as exc:
            raise _unexpected(exc, "staff count") from exc
        return len(rows)

    async def create(
        self,
        *,
        name: str,
        email: str,
        role: Role,
        password_hash: str | None = None,
        external_identity_id: str | None = None,
    ) -> int:
        payload = {
            "name": name,
            "email": email,
            "role": Role(role).value,
            "password_hash": password_hash,
            "google_id": external_identity_id,
        }
        try:
            rows = await self._table.request(
                "POST", json=payload, headers=RETURN_REPRESENTATION, action="staff create"
            )
        except HostedAPIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                logger.info("Staff insert rejected, email already present: %s", email)
                raise DuplicateEmail() from exc
            raise _unexpected(exc, "staff create") from exc
        if not rows:
            logger.error("Hosted store returned no row for staff create")
            raise StoreError()
        return int(rows[0]["id"])

    async def _patch(self, staff_id: int, values: dict, action: str) -> None:
        try:
            rows = await self._table.request(
                "PATCH",
                params={"id": f"eq.{staff_id}"},
                json=values,
                headers=RETURN_REPRESENTATION,
                action=action,
            )
        except HostedAPIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise DuplicateEmail("External identity already linked") from exc
            raise _unexpected(exc, action) from exc
        if not rows:
            raise NotFound("Staff member not found")

    async def link_external_id(self, staff_id: int, external_id: str) -> None:
        await self._patch(staff_id, {"google_id": external_id}, "staff link")

    async def update_password(self, staff_id: int, password_hash: str) -> None:
        await self._patch(staff_id, {"password_hash": password_hash}, "password update")

    async def delete(self, staff_id: int) -> None:
        try:
            rows = await self._table.request(
                "DELETE",
                params={"id": f"eq.{staff_id}"},
                headers=RETURN_REPRESENTATION,
                action="staff delete",
            )
        except HostedAPIError as exc:
            raise _unexpected(exc, "staff delete") from exc
        if not rows:
            raise NotFound("Staff member not found")


class HostedScheduleRepository:
    def __init__(self, client: httpx.AsyncClient):
        self._table = _HostedTable(client, "schedules")

    async def _list(self, filters: dict[str, str]) -> Sequence[ScheduleEntry]:
        params = {"select": SCHEDULE_SELECT, "order": SCHEDULE_ORDER, **filters}
        try:
            rows = await self._table.request("GET", params=params, action="schedule list")
        except HostedAPIError as exc:
            raise _unexpected(exc, "schedule list") from exc
        return [_to_entry(r) for r in rows]

    async def list_for_staff(self, staff_id: int) -> Sequence[ScheduleEntry]:
        return await self._list({"staff_id": f"eq.{staff_id}"})

    async def list_all(self) -> Sequence[ScheduleEntry]:
        return await self._list({})

    async def create(self, fields: ScheduleFields) -> int:
        try:
            rows = await self._table.request(
                "POST",
                json=fields.model_dump(mode="json"),
                headers=RETURN_REPRESENTATION,
                action="schedule create",
            )
        except HostedAPIError as exc:
            if exc.code == FOREIGN_KEY_VIOLATION:
                raise NotFound("Staff member not found") from exc
            raise _unexpected(exc, "schedule create") from exc
        if not rows:
            logger.error("Hosted store returned no row for schedule create")
            raise StoreError()
        return int(rows[0]["id"])

    async def update(self, schedule_id: int, fields: ScheduleFields) -> None:
        try:
            rows = await self._table.request(
                "PATCH",
                params={"id": f"eq.{schedule_id}"},
                json=fields.model_dump(mode="json"),
                headers=RETURN_REPRESENTATION,
                action="schedule update",
            )
        except HostedAPIError as exc:
            if exc.code == FOREIGN_KEY_VIOLATION:
                raise NotFound("Staff member not found") from exc
            raise _unexpected(exc, "schedule update") from exc
        if not rows:
            raise NotFound("Schedule not found")

    async def delete(self, schedule_id: int) -> None:
        try:
            rows = await self._table.request(
                "DELETE",
                params={"id": f"eq.{schedule_id}"},
                headers=RETURN_REPRESENTATION,
                action="schedule delete",
            )
        except HostedAPIError as exc:
            raise _unexpected(exc, "schedule delete") from exc
        if not rows:
            raise NotFound("Schedule not found")


def build_hosted_store(client: httpx.AsyncClient) -> Store:
    return Store(staff=HostedStaffRepository(client), schedules=HostedScheduleRepository(client))
