"""Staff account API routes (admin only)."""

from fastapi import APIRouter, Depends

from schedulehub.auth.guard import require_admin
from schedulehub.events.notifier import Publisher, get_publisher
from schedulehub.schemas import CreatedResponse, Identity, MessageResponse, StaffCreateRequest, StaffOut
from schedulehub.staff import service
from schedulehub.store import Store, get_store

router = APIRouter(prefix="/staff", tags=["staff"])


@router.get("", response_model=list[StaffOut])
async def list_staff(
    identity: Identity = Depends(require_admin),
    store: Store = Depends(get_store),
):
    """All staff accounts, without password hashes."""
    accounts = await service.list_staff(store, identity)
    return [StaffOut.model_validate(a, from_attributes=True) for a in accounts]


@router.post("", response_model=CreatedResponse)
async def create_staff(
    body: StaffCreateRequest,
    identity: Identity = Depends(require_admin),
    store: Store = Depends(get_store),
    publish: Publisher = Depends(get_publisher),
):
    """Create a password account. 400 on missing fields, invalid role or duplicate email."""
    staff_id = await service.create_staff(store, identity, body, publish)
    return CreatedResponse(id=staff_id, message="Staff member added successfully")


@router.delete("/{staff_id}", response_model=MessageResponse)
async def delete_staff(
    staff_id: int,
    identity: Identity = Depends(require_admin),
    store: Store = Depends(get_store),
    publish: Publisher = Depends(get_publisher),
):
    """Delete an account together with its schedules. 404 when it does not exist."""
    await service.delete_staff(store, identity, staff_id, publish)
    return MessageResponse(message="Staff member deleted successfully")
