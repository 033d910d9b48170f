from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from typing import List, Optional

from app.api.bill_views import tenant_bill_views
from app.api.deps import get_gateway
from app.core.auth import require_admin, User
from app.core.audit import log_audit
from app.core.gateway import Gateway
from app.schemas.bill import BillOut
from app.schemas.deposit import DepositCreate, DepositOut
from app.schemas.payment import PaymentOut
from app.schemas.room import RoomOut
from app.schemas.tenant import TenantCreate, TenantUpdate, TenantOut

router = APIRouter(prefix="/tenants", tags=["tenants"])


class TenantDetailsOut(BaseModel):
    tenant: TenantOut
    room: Optional[RoomOut] = None
    bills: List[BillOut] = []
    payments: List[PaymentOut] = []
    deposits: List[DepositOut] = []


def _get_tenant_or_404(gw: Gateway, tenant_id: str):
    tenant = gw.get("tenants", tenant_id)
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant not found")
    return tenant


@router.get("", response_model=List[TenantOut])
def list_tenants(
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
    room_id: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="search by name, contact or room number"),
):
    filters = {"room_id": room_id} if room_id else {}
    tenants = gw.list("tenants", order_by="name", **filters)
    if search:
        needle = search.strip().lower()
        room_numbers = {r.id: r.room_number.lower() for r in gw.list("rooms")}
        tenants = [
            t for t in tenants
            if needle in t.name.lower()
            or needle in t.contact.lower()
            or needle in room_numbers.get(t.room_id, "")
        ]
    return tenants


@router.get("/{tenant_id}", response_model=TenantOut)
def get_tenant(
    tenant_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    return _get_tenant_or_404(gw, tenant_id)


@router.get("/{tenant_id}/details", response_model=TenantDetailsOut)
def get_tenant_details(
    tenant_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    tenant = _get_tenant_or_404(gw, tenant_id)
    room = gw.get("rooms", tenant.room_id)
    payments = gw.list("payments", tenant_id=tenant_id, order_by="payment_date", descending=True)
    deposits = gw.list("deposits", tenant_id=tenant_id, order_by="deposit_date", descending=True)
    return TenantDetailsOut(
        tenant=TenantOut.model_validate(tenant),
        room=RoomOut.model_validate(room) if room else None,
        bills=tenant_bill_views(gw, tenant_id),
        payments=[PaymentOut.model_validate(p) for p in payments],
        deposits=[DepositOut.model_validate(d) for d in deposits],
    )


@router.post("", response_model=TenantOut, status_code=201)
def create_tenant(
    payload: TenantCreate,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    """
    Register a tenant for an existing auth user and move them into a room.
    The room becomes occupied; an optional deposit is recorded as active.
    """
    room = gw.get("rooms", payload.room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    if gw.first("tenants", user_id=payload.user_id):
        raise HTTPException(status_code=409, detail="A tenant is already linked to this user")

    data = payload.model_dump(exclude={"deposit_amount"})
    tenant = gw.insert("tenants", data, commit=False)
    room.status = "occupied"

    if payload.deposit_amount:
        gw.insert(
            "deposits",
            {
                "tenant_id": tenant.id,
                "room_id": room.id,
                "amount": payload.deposit_amount,
                "deposit_date": payload.start_date,
                "status": "active",
                "method": "in_person",
            },
            commit=False,
        )
    gw.commit()
    gw.db.refresh(tenant)

    log_audit(
        gw.db,
        actor=current_user,
        action="created",
        entity_type="tenant",
        entity_id=tenant.id,
        room_id=tenant.room_id,
        description=f"Tenant created: {tenant.name} (room {room.room_number})",
    )
    return tenant


@router.patch("/{tenant_id}", response_model=TenantOut)
def update_tenant(
    tenant_id: str,
    payload: TenantUpdate,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    _get_tenant_or_404(gw, tenant_id)
    data = payload.model_dump(exclude_unset=True)
    if "room_id" in data and not gw.get("rooms", data["room_id"]):
        raise HTTPException(status_code=404, detail="Room not found")

    tenant = gw.update("tenants", tenant_id, data)
    log_audit(
        gw.db,
        actor=current_user,
        action="updated",
        entity_type="tenant",
        entity_id=tenant.id,
        room_id=tenant.room_id,
        description=f"Tenant updated: {tenant.name}",
    )
    return tenant


@router.delete("/{tenant_id}")
def delete_tenant(
    tenant_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    tenant = _get_tenant_or_404(gw, tenant_id)
    name, room_id = tenant.name, tenant.room_id
    gw.delete("tenants", tenant_id)
    log_audit(
        gw.db,
        actor=current_user,
        action="deleted",
        entity_type="tenant",
        entity_id=tenant_id,
        room_id=room_id,
        description=f"Tenant deleted: {name}",
    )
    return {"ok": True}


@router.get("/{tenant_id}/deposits", response_model=List[DepositOut])
def list_tenant_deposits(
    tenant_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    _get_tenant_or_404(gw, tenant_id)
    return gw.list("deposits", tenant_id=tenant_id, order_by="deposit_date", descending=True)


@router.post("/{tenant_id}/deposits", response_model=DepositOut, status_code=201)
def add_deposit(
    tenant_id: str,
    payload: DepositCreate,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    tenant = _get_tenant_or_404(gw, tenant_id)
    deposit = gw.insert(
        "deposits",
        {**payload.model_dump(), "tenant_id": tenant.id, "room_id": tenant.room_id, "status": "active"},
    )
    log_audit(
        gw.db,
        actor=current_user,
        action="created",
        entity_type="deposit",
        entity_id=deposit.id,
        status=deposit.status,
        room_id=deposit.room_id,
        description=f"Deposit of {float(deposit.amount):.2f} recorded for {tenant.name}",
    )
    return deposit
