"""
Tenant portal: read-only views of the signed-in tenant's own room, bills
and payments, plus submitting a payment for review.
"""
import logging
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.api.bill_views import find_bill_view, tenant_bill_views
from app.api.deps import get_gateway
from app.core.auth import get_current_tenant, get_current_user, User
from app.core.audit import log_audit
from app.core.gateway import Gateway
from app.core.ledger import with_allocations
from app.core.summaries import accepted_total, split_tenant_bills
from app.models.tenant import Tenant
from app.schemas.bill import BillDetailOut
from app.schemas.payment import PaymentOut, TenantPaymentCreate
from app.schemas.room import RoomOut
from app.schemas.summary import TenantBillsOut, TenantDashboardOut
from app.schemas.tenant import TenantOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenant", tags=["tenant-portal"])


def _own_bill_view(gw: Gateway, tenant: Tenant, bill_id: str):
    view = find_bill_view(gw, bill_id)
    if view is None:
        raise HTTPException(status_code=404, detail="Bill not found")
    if view.tenant_id != tenant.id:
        raise HTTPException(status_code=403, detail="This bill belongs to another tenant")
    return view


@router.get("/me", response_model=TenantOut)
def get_me(tenant: Tenant = Depends(get_current_tenant)):
    return tenant


@router.get("/room", response_model=RoomOut)
def get_my_room(
    tenant: Tenant = Depends(get_current_tenant),
    gw: Gateway = Depends(get_gateway),
):
    room = gw.get("rooms", tenant.room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return room


@router.get("/dashboard", response_model=TenantDashboardOut)
def get_my_dashboard(
    tenant: Tenant = Depends(get_current_tenant),
    gw: Gateway = Depends(get_gateway),
):
    """Rent, bills with something still owed, and everything accepted so far."""
    room = gw.get("rooms", tenant.room_id)
    views = tenant_bill_views(gw, tenant.id)
    owed = [v for v in views if v.remaining > 0]
    return TenantDashboardOut(
        monthly_rent=float(room.rent_amount) if room else 0.0,
        pending_bills_count=len(owed),
        pending_total=sum((v.amount for v in owed), 0.0),
        total_paid=accepted_total(gw.list("payments", tenant_id=tenant.id)),
    )


@router.get("/bills", response_model=TenantBillsOut)
def get_my_bills(
    tenant: Tenant = Depends(get_current_tenant),
    gw: Gateway = Depends(get_gateway),
):
    today = datetime.now(timezone.utc).date()
    return split_tenant_bills(tenant_bill_views(gw, tenant.id, today), today)


@router.get("/bills/{bill_id}", response_model=BillDetailOut)
def get_my_bill(
    bill_id: str,
    tenant: Tenant = Depends(get_current_tenant),
    gw: Gateway = Depends(get_gateway),
):
    return with_allocations(_own_bill_view(gw, tenant, bill_id))


@router.get("/payments", response_model=List[PaymentOut])
def list_my_payments(
    tenant: Tenant = Depends(get_current_tenant),
    gw: Gateway = Depends(get_gateway),
):
    return gw.list("payments", tenant_id=tenant.id, order_by="payment_date", descending=True)


@router.post("/payments", response_model=PaymentOut, status_code=201)
def submit_payment(
    payload: TenantPaymentCreate,
    tenant: Tenant = Depends(get_current_tenant),
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(get_current_user),
):
    """
    Submit a payment for one of the tenant's bills. It stays pending until
    an admin accepts it, so the bill's paid total does not move yet.
    """
    view = _own_bill_view(gw, tenant, payload.bill_id)

    amount = payload.amount_paid
    if amount is None:
        if view.remaining <= 0:
            raise HTTPException(status_code=400, detail="Bill has no remaining balance")
        amount = view.remaining

    data = payload.model_dump()
    data.update(
        tenant_id=tenant.id,
        amount_paid=amount,
        payment_date=payload.payment_date or datetime.now(timezone.utc).date(),
        status="pending",
    )
    payment = gw.insert("payments", data)
    logger.info("Tenant %s submitted payment %s of %.2f for bill %s", tenant.id, payment.id, amount, view.id)

    log_audit(
        gw.db,
        actor=current_user,
        action="submitted",
        entity_type="payment",
        entity_id=payment.id,
        source="tenant_portal",
        status=payment.status,
        room_id=view.room_id,
        description=f"Payment submitted: {amount:.2f} via {payment.method}",
    )
    return payment
