import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from app.api.bill_views import all_bill_views, find_bill_view
from app.api.deps import get_gateway
from app.core.auth import require_admin, User
from app.core.audit import log_audit
from app.core.billing import calculate_total_bill, validate_bill_items
from app.core.gateway import Gateway
from app.core.ledger import with_allocations
from app.core.periods import parse_month_key
from app.core.summaries import (
    calculate_accurate_billing_summary,
    calculate_admin_billing_summary,
    calculate_monthly_admin_summary,
    calculate_year_summaries,
)
from app.schemas.bill import BillCreate, BillDetailOut, BillOut, BillUpdate
from app.schemas.summary import AccurateBillingSummaryOut, BillingSummaryOut, MonthlySummaryOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bills", tags=["bills"])


def _check_month(month: str) -> str:
    try:
        year, m = parse_month_key(month)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid month '{month}', expected YYYY-MM")
    return f"{year}-{m:02d}"


@router.get("", response_model=List[BillOut])
def list_bills(
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
    tenant_id: Optional[str] = Query(None),
    room_id: Optional[str] = Query(None),
    month: Optional[str] = Query(None, description="Bill period YYYY-MM"),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    status: Optional[str] = Query(None, description="pending|partial|paid|overdue"),
):
    """
    Bills with the carry-over item refreshed, the amount recomputed from the
    items, and paid/remaining/status derived from accepted payments.
    """
    views = all_bill_views(gw)
    if tenant_id:
        views = [v for v in views if v.tenant_id == tenant_id]
    if room_id:
        views = [v for v in views if v.room_id == room_id]
    if month:
        month = _check_month(month)
        views = [v for v in views if v.bill_period == month]
    if year is not None:
        views = [v for v in views if v.due_date.year == year]
    if status:
        views = [v for v in views if v.status == status]
    return views


@router.get("/summary", response_model=BillingSummaryOut)
def billing_summary(
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    return calculate_admin_billing_summary(all_bill_views(gw), gw.list("payments"))


@router.get("/summary/accurate", response_model=AccurateBillingSummaryOut)
def accurate_billing_summary(
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    """Same totals without carried remaining_balance items."""
    return calculate_accurate_billing_summary(all_bill_views(gw), gw.list("payments"))


@router.get("/monthly-summary", response_model=List[MonthlySummaryOut])
def monthly_summaries(
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
    year: Optional[int] = Query(None, ge=2000, le=2100, description="Defaults to the current year"),
):
    if year is None:
        year = datetime.now(timezone.utc).year
    return calculate_year_summaries(all_bill_views(gw), gw.list("payments"), year)


@router.get("/monthly-summary/{month_key}", response_model=MonthlySummaryOut)
def monthly_summary(
    month_key: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    month_key = _check_month(month_key)
    return calculate_monthly_admin_summary(all_bill_views(gw), gw.list("payments"), month_key)


@router.get("/{bill_id}", response_model=BillDetailOut)
def get_bill(
    bill_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    view = find_bill_view(gw, bill_id)
    if view is None:
        raise HTTPException(status_code=404, detail="Bill not found")
    return with_allocations(view)


@router.post("", response_model=BillOut, status_code=201)
def create_bill(
    payload: BillCreate,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    """
    Manually create a bill. With items, the stored amount is their sum;
    without items the given amount is used as is.
    """
    tenant = gw.get("tenants", payload.tenant_id)
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant not found")

    if payload.items and not validate_bill_items(payload.items):
        logger.warning("Manual bill for tenant %s is missing rent, electricity, water or wifi items", tenant.id)
    amount = calculate_total_bill(payload.items) if payload.items else payload.amount
    bill = gw.insert(
        "bills",
        {
            "tenant_id": tenant.id,
            "room_id": payload.room_id or tenant.room_id,
            "amount": amount,
            "due_date": payload.due_date,
            "description": payload.description,
        },
        commit=False,
    )
    for item in payload.items:
        gw.insert("bill_items", {**item.model_dump(), "bill_id": bill.id}, commit=False)
    gw.commit()

    view = find_bill_view(gw, bill.id)
    log_audit(
        gw.db,
        actor=current_user,
        action="created",
        entity_type="bill",
        entity_id=view.id,
        status=view.status,
        due_date=view.due_date,
        room_id=view.room_id,
        description=f"Bill created: {view.description or view.bill_period} ({view.amount:.2f})",
    )
    return view


@router.patch("/{bill_id}", response_model=BillOut)
def update_bill(
    bill_id: str,
    payload: BillUpdate,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    bill = gw.get("bills", bill_id)
    if not bill:
        raise HTTPException(status_code=404, detail="Bill not found")

    data = payload.model_dump(exclude_unset=True, exclude={"items"})
    if payload.items is not None:
        for item in list(bill.items):
            gw.db.delete(item)
        for item in payload.items:
            gw.insert("bill_items", {**item.model_dump(), "bill_id": bill.id}, commit=False)
        if payload.items:
            data["amount"] = calculate_total_bill(payload.items)
    gw.update("bills", bill_id, data)

    view = find_bill_view(gw, bill_id)
    log_audit(
        gw.db,
        actor=current_user,
        action="updated",
        entity_type="bill",
        entity_id=view.id,
        status=view.status,
        due_date=view.due_date,
        room_id=view.room_id,
        description=f"Bill updated: {view.description or view.bill_period} ({view.amount:.2f})",
    )
    return view


@router.delete("/{bill_id}")
def delete_bill(
    bill_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    bill = gw.get("bills", bill_id)
    if not bill:
        raise HTTPException(status_code=404, detail="Bill not found")
    due_date, room_id, description = bill.due_date, bill.room_id, bill.description
    gw.delete("bills", bill_id)
    log_audit(
        gw.db,
        actor=current_user,
        action="deleted",
        entity_type="bill",
        entity_id=bill_id,
        due_date=due_date,
        room_id=room_id,
        description=f"Bill deleted: {description or bill_id}",
    )
    return {"ok": True}
