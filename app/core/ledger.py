"""
Read-side bill views.

Stored bills are turned into BillOut once per read: the carry-over item is
re-derived from the previous period's bill, the amount becomes the items
sum, and paid/remaining/status are computed from the accepted payments.
"""
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional

from app.core.billing import (
    allocate_payment,
    bill_total,
    calculate_total_paid,
    derive_bill_status,
    refresh_carry_over,
)
from app.core.periods import month_key, monthly_description, previous_month
from app.schemas.bill import BillDetailOut, BillOut


def build_bill_view(bill, previous: Optional[BillOut], payments: List, today: Optional[date] = None) -> BillOut:
    stored_items = list(bill.items or [])
    if stored_items:
        items = refresh_carry_over(stored_items, previous, payments)
    else:
        # Manual bills without items keep their stored amount
        items = []

    view = BillOut(
        id=bill.id,
        tenant_id=bill.tenant_id,
        room_id=bill.room_id,
        amount=float(bill.amount or 0),
        due_date=bill.due_date,
        description=bill.description,
        status="pending",
        bill_period=month_key(bill.due_date),
        items=items,
        created_at=bill.created_at,
        updated_at=bill.updated_at,
    )
    total = bill_total(view)
    paid = calculate_total_paid(view, payments)
    view.amount = total
    view.total_paid = paid
    view.remaining = total - paid
    view.status = derive_bill_status(paid, total, bill.due_date, today)
    return view


def period_bill(views: Iterable[BillOut], period: str) -> Optional[BillOut]:
    """
    The bill whose balance carries over from `period`: the generated monthly
    bill when there is one, otherwise the earliest bill due that month.
    """
    candidates = sorted((v for v in views if v.bill_period == period), key=lambda v: v.due_date)
    if not candidates:
        return None
    monthly = monthly_description(period)
    return next((v for v in candidates if v.description == monthly), candidates[0])


def build_bill_views(bills: Iterable, payments: Iterable, today: Optional[date] = None) -> List[BillOut]:
    """
    Views for every bill, in the order given. Bills are evaluated oldest
    first per tenant so a carry-over always reads the already refreshed
    previous bill.
    """
    bills = list(bills)
    payments = list(payments)

    by_tenant: Dict[str, List] = defaultdict(list)
    for bill in bills:
        by_tenant[bill.tenant_id].append(bill)

    views: Dict[str, BillOut] = {}
    for tenant_bills in by_tenant.values():
        by_period: Dict[str, List[BillOut]] = defaultdict(list)
        for bill in sorted(tenant_bills, key=lambda b: b.due_date):
            prev_key = previous_month(month_key(bill.due_date))
            prev = period_bill(by_period.get(prev_key, []), prev_key)
            view = build_bill_view(bill, prev, payments, today)
            views[bill.id] = view
            by_period[view.bill_period].append(view)

    return [views[b.id] for b in bills]


def with_allocations(view: BillOut) -> BillDetailOut:
    detail = BillDetailOut(**view.model_dump())
    detail.allocations = allocate_payment(view.items, view.amount, view.total_paid)
    return detail

