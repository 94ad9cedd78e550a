"""Pydantic schemas for domain records and request/response validation."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"


class ScheduleStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# ─── Domain records ───────────────────────────────────────────

class StaffAccount(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    password_hash: str | None = None
    external_identity_id: str | None = None
    created_at: datetime | None = None


class ScheduleEntry(BaseModel):
    id: int
    staff_id: int
    title: str
    description: str = ""
    date: str
    start_time: str
    end_time: str
    location: str = ""
    status: ScheduleStatus = ScheduleStatus.SCHEDULED
    created_at: datetime | None = None
    staff_name: str | None = None
    staff_email: str | None = None


class ScheduleFields(BaseModel):
    """Validated, complete set of mutable schedule fields."""

    staff_id: int
    title: str
    description: str = ""
    date: str
    start_time: str
    end_time: str
    location: str = ""
    status: ScheduleStatus = ScheduleStatus.SCHEDULED


class Identity(BaseModel):
    """Authenticated caller, decoded from an access token."""

    staff_id: int
    email: str
    role: Role


# ─── Requests ─────────────────────────────────────────────────

class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class ScheduleRequest(BaseModel):
    # Everything optional here; the schedule service reports what is missing
    staff_id: int | None = None
    title: str | None = None
    description: str | None = None
    date: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    location: str | None = None
    status: str | None = None


class StaffCreateRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = None


# ─── Responses ────────────────────────────────────────────────

class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: Role


class LoginResponse(BaseModel):
    token: str
    user: UserOut


class StaffOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: Role
    created_at: datetime | None = None


class CreatedResponse(BaseModel):
    id: int
    message: str


class MessageResponse(BaseModel):
    message: str
