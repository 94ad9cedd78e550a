"""Schedule API routes."""

from fastapi import APIRouter, Depends

from schedulehub.auth.guard import get_identity, require_admin
from schedulehub.events.notifier import Publisher, get_publisher
from schedulehub.schedules import service
from schedulehub.schemas import CreatedResponse, Identity, MessageResponse, ScheduleEntry, ScheduleRequest
from schedulehub.store import Store, get_store

router = APIRouter(prefix="/schedules", tags=["schedules"])


@router.get("", response_model=list[ScheduleEntry])
async def list_visible(
    identity: Identity = Depends(get_identity),
    store: Store = Depends(get_store),
):
    """All entries for admins, the caller's own entries for staff."""
    return await service.list_visible(store, identity)


@router.get("/mine", response_model=list[ScheduleEntry])
async def list_mine(
    identity: Identity = Depends(get_identity),
    store: Store = Depends(get_store),
):
    """The caller's entries ordered by date then start time."""
    return await service.list_mine(store, identity)


@router.get("/all", response_model=list[ScheduleEntry])
async def list_all(
    identity: Identity = Depends(require_admin),
    store: Store = Depends(get_store),
):
    """Every entry with its owner's name and email (admin only)."""
    return await service.list_all(store, identity)


@router.post("", response_model=CreatedResponse)
async def create_schedule(
    body: ScheduleRequest,
    identity: Identity = Depends(require_admin),
    store: Store = Depends(get_store),
    publish: Publisher = Depends(get_publisher),
):
    """Create an entry (admin only).

    Requires staff_id, title, date, start_time and end_time; description and
    location default to empty, status to `scheduled`. 404 when staff_id does
    not reference an account.
    """
    schedule_id = await service.create_schedule(store, identity, body, publish)
    return CreatedResponse(id=schedule_id, message="Schedule created successfully")


@router.put("/{schedule_id}", response_model=MessageResponse)
async def update_schedule(
    schedule_id: int,
    body: ScheduleRequest,
    identity: Identity = Depends(require_admin),
    store: Store = Depends(get_store),
    publish: Publisher = Depends(get_publisher),
):
    """Overwrite every field of an entry (admin only). 404 when it does not exist."""
    await service.update_schedule(store, identity, schedule_id, body, publish)
    return MessageResponse(message="Schedule updated successfully")


@router.delete("/{schedule_id}", response_model=MessageResponse)
async def delete_schedule(
    schedule_id: int,
    identity: Identity = Depends(require_admin),
    store: Store = Depends(get_store),
    publish: Publisher = Depends(get_publisher),
):
    """Delete an entry (admin only). 404 when it does not exist."""
    await service.delete_schedule(store, identity, schedule_id, publish)
    return MessageResponse(message="Schedule deleted successfully")
