from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from app.api.bill_views import tenant_bill_views
from app.api.deps import get_gateway
from app.core.auth import require_admin, User
from app.core.audit import log_audit
from app.core.gateway import Gateway
from app.schemas.payment import PaymentOut
from app.schemas.room import RoomCreate, RoomUpdate, RoomOut, RoomDetailsOut
from app.schemas.tenant import TenantOut

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.get("", response_model=List[RoomOut])
def list_rooms(
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
    status: Optional[str] = Query(None, description="available|occupied|maintenance"),
    search: Optional[str] = Query(None, description="search by room number or type"),
):
    filters = {"status": status} if status else {}
    rooms = gw.list("rooms", order_by="room_number", **filters)
    if search:
        needle = search.strip().lower()
        rooms = [r for r in rooms if needle in r.room_number.lower() or needle in (r.type or "").lower()]
    return rooms


@router.get("/{room_id}", response_model=RoomOut)
def get_room(
    room_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    room = gw.get("rooms", room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return room


@router.get("/{room_id}/details", response_model=RoomDetailsOut)
def get_room_details(
    room_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    """
    Room with its current tenant, the tenant's bills (newest due date first)
    and payments (newest payment date first).
    """
    room = gw.get("rooms", room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")

    tenant = gw.first("tenants", room_id=room_id)
    if tenant is None:
        return RoomDetailsOut(room=RoomOut.model_validate(room))

    bills = [v for v in tenant_bill_views(gw, tenant.id) if v.room_id == room_id]
    payments = gw.list("payments", tenant_id=tenant.id, order_by="payment_date", descending=True)
    return RoomDetailsOut(
        room=RoomOut.model_validate(room),
        tenant=TenantOut.model_validate(tenant),
        bills=bills,
        payments=[PaymentOut.model_validate(p) for p in payments],
    )


@router.post("", response_model=RoomOut, status_code=201)
def create_room(
    payload: RoomCreate,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    room = gw.insert("rooms", payload.model_dump())
    log_audit(
        gw.db,
        actor=current_user,
        action="created",
        entity_type="room",
        entity_id=room.id,
        status=room.status,
        room_id=room.id,
        description=f"Room created: {room.room_number}",
    )
    return room


@router.patch("/{room_id}", response_model=RoomOut)
def update_room(
    room_id: str,
    payload: RoomUpdate,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    room = gw.update("rooms", room_id, payload.model_dump(exclude_unset=True))
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    log_audit(
        gw.db,
        actor=current_user,
        action="updated",
        entity_type="room",
        entity_id=room.id,
        status=room.status,
        room_id=room.id,
        description=f"Room updated: {room.room_number}",
    )
    return room


@router.delete("/{room_id}", status_code=204)
def delete_room(
    room_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    room = gw.get("rooms", room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    if gw.first("tenants", room_id=room_id):
        raise HTTPException(status_code=400, detail="Room still has a tenant; move or remove the tenant first")

    room_number = room.room_number
    gw.delete("rooms", room_id)
    log_audit(
        gw.db,
        actor=current_user,
        action="deleted",
        entity_type="room",
        entity_id=room_id,
        room_id=room_id,
        description=f"Room deleted: {room_number}",
    )
    return None
