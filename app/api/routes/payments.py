from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from typing import List, Optional

from app.api.bill_views import tenant_bill_views
from app.api.deps import get_gateway
from app.core.auth import require_admin, User
from app.core.audit import log_audit
from app.core.gateway import Gateway
from app.core.periods import month_key
from app.schemas.bill import BillOut
from app.schemas.payment import PaymentCreate, PaymentOut, PaymentUpdate, check_method_fields

router = APIRouter(prefix="/payments", tags=["payments"])


class SuggestedBillOut(BaseModel):
    """Bill to pre-select in the payment form, with what is still owed on it."""
    bill: Optional[BillOut] = None
    suggested_amount: float = 0.0


def _get_payment_or_404(gw: Gateway, payment_id: str):
    payment = gw.get("payments", payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment


def _log_payment(gw: Gateway, current_user: User, action: str, payment, description: str):
    bill = gw.get("bills", payment.bill_id)
    log_audit(
        gw.db,
        actor=current_user,
        action=action,
        entity_type="payment",
        entity_id=payment.id,
        status=payment.status,
        room_id=bill.room_id if bill else None,
        description=description,
    )


@router.get("", response_model=List[PaymentOut])
def list_payments(
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
    tenant_id: Optional[str] = Query(None),
    bill_id: Optional[str] = Query(None),
    status: Optional[str] = Query(None, description="pending|accepted|declined"),
    method: Optional[str] = Query(None, description="gcash|bank|in_person"),
    search: Optional[str] = Query(None, description="search by tenant name or reference number"),
):
    filters = {}
    if tenant_id:
        filters["tenant_id"] = tenant_id
    if bill_id:
        filters["bill_id"] = bill_id
    if status:
        filters["status"] = status
    if method:
        filters["method"] = method

    payments = gw.list("payments", order_by="payment_date", descending=True, **filters)
    if search:
        needle = search.strip().lower()
        names = {t.id: t.name.lower() for t in gw.list("tenants")}
        payments = [
            p for p in payments
            if needle in names.get(p.tenant_id, "")
            or needle in (p.reference_number or "").lower()
        ]
    return payments


@router.get("/suggested-bill", response_model=SuggestedBillOut)
def suggested_bill(
    tenant_id: str = Query(...),
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    """
    The tenant's bill for the current month when there is one, otherwise
    their latest bill that is not fully paid.
    """
    if not gw.get("tenants", tenant_id):
        raise HTTPException(status_code=404, detail="Tenant not found")

    views = tenant_bill_views(gw, tenant_id)
    current = month_key(datetime.now(timezone.utc).date())
    bill = next((v for v in views if v.bill_period == current), None)
    if bill is None:
        bill = next((v for v in views if v.status != "paid"), None)
    if bill is None:
        return SuggestedBillOut()
    return SuggestedBillOut(bill=bill, suggested_amount=max(bill.remaining, 0.0))


@router.get("/{payment_id}", response_model=PaymentOut)
def get_payment(
    payment_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    return _get_payment_or_404(gw, payment_id)


@router.post("", response_model=PaymentOut, status_code=201)
def create_payment(
    payload: PaymentCreate,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    bill = gw.get("bills", payload.bill_id)
    if not bill:
        raise HTTPException(status_code=404, detail="Bill not found")

    data = payload.model_dump()
    data["tenant_id"] = payload.tenant_id or bill.tenant_id
    if data["tenant_id"] != bill.tenant_id:
        raise HTTPException(status_code=400, detail="Payment tenant does not match the bill's tenant")

    payment = gw.insert("payments", data)
    _log_payment(
        gw, current_user, "created", payment,
        f"Payment recorded: {float(payment.amount_paid):.2f} via {payment.method} ({payment.status})",
    )
    return payment


@router.patch("/{payment_id}", response_model=PaymentOut)
def update_payment(
    payment_id: str,
    payload: PaymentUpdate,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    payment = _get_payment_or_404(gw, payment_id)
    data = payload.model_dump(exclude_unset=True)

    # Method rules apply to the row as it will be stored
    try:
        check_method_fields(
            data.get("method", payment.method),
            data.get("reference_number", payment.reference_number),
            data.get("received_by", payment.received_by),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    bill = gw.get("bills", data.get("bill_id", payment.bill_id))
    if not bill:
        raise HTTPException(status_code=404, detail="Bill not found")
    # A payment moved to another bill follows that bill's tenant
    if "bill_id" in data:
        data.setdefault("tenant_id", bill.tenant_id)
    if data.get("tenant_id", payment.tenant_id) != bill.tenant_id:
        raise HTTPException(status_code=400, detail="Payment tenant does not match the bill's tenant")

    payment = gw.update("payments", payment_id, data)
    _log_payment(gw, current_user, "updated", payment, f"Payment updated: {float(payment.amount_paid):.2f}")
    return payment


def _set_status(gw: Gateway, payment_id: str, new_status: str, current_user: User):
    payment = _get_payment_or_404(gw, payment_id)
    if payment.status == new_status:
        raise HTTPException(status_code=400, detail=f"Payment is already {new_status}")

    payment = gw.update("payments", payment_id, {"status": new_status})
    _log_payment(
        gw, current_user, new_status, payment,
        f"Payment {new_status}: {float(payment.amount_paid):.2f} via {payment.method}",
    )
    return payment


@router.post("/{payment_id}/accept", response_model=PaymentOut)
def accept_payment(
    payment_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    """Accepted payments start counting towards the bill's paid total."""
    return _set_status(gw, payment_id, "accepted", current_user)


@router.post("/{payment_id}/decline", response_model=PaymentOut)
def decline_payment(
    payment_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    return _set_status(gw, payment_id, "declined", current_user)


@router.delete("/{payment_id}")
def delete_payment(
    payment_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    payment = _get_payment_or_404(gw, payment_id)
    bill = gw.get("bills", payment.bill_id)
    room_id = bill.room_id if bill else None
    amount = float(payment.amount_paid)
    gw.delete("payments", payment_id)
    log_audit(
        gw.db,
        actor=current_user,
        action="deleted",
        entity_type="payment",
        entity_id=payment_id,
        room_id=room_id,
        description=f"Payment deleted: {amount:.2f}",
    )
    return {"ok": True}
