"""
Dashboard aggregates over already-built bill views.

Revenue is cash basis: accepted payments count in the month of their
payment date, whichever bill they settle.
"""
from datetime import date
from typing import Iterable, List, Optional

from app.core.billing import (
    BILL_STATUSES,
    CARRY_OVER,
    PAYMENT_ACCEPTED,
    bill_status,
    bill_total,
    calculate_remaining_bill,
)
from app.core.periods import in_month, month_key, month_name
from app.schemas.bill import BillOut
from app.schemas.summary import (
    AccurateBillingSummaryOut,
    BillingSummaryOut,
    MonthlySummaryOut,
    StatusCounts,
    TenantBillsOut,
    TenantSummaryOut,
)


def accepted_total(payments: Iterable) -> float:
    return sum((float(p.amount_paid) for p in payments if p.status == PAYMENT_ACCEPTED), 0.0)


def calculate_monthly_admin_summary(
    bills: Iterable,
    payments: Iterable,
    month: str,
    today: Optional[date] = None,
) -> MonthlySummaryOut:
    payments = list(payments)
    month_bills = [b for b in bills if in_month(b.due_date, month)]
    month_payments = [p for p in payments if in_month(p.payment_date, month)]

    total_amount = sum((bill_total(b) for b in month_bills), 0.0)
    revenue = accepted_total(month_payments)

    counts = {status: 0 for status in BILL_STATUSES}
    for bill in month_bills:
        counts[bill_status(bill, payments, today)] += 1

    return MonthlySummaryOut(
        month_key=month,
        month_name=month_name(month),
        total_bills=len(month_bills),
        total_amount=total_amount,
        total_paid=revenue,
        remaining=total_amount - revenue,
        revenue=revenue,
        status_counts=StatusCounts(**counts),
    )


def calculate_year_summaries(bills: Iterable, payments: Iterable, year: int, today: Optional[date] = None) -> List[MonthlySummaryOut]:
    bills = list(bills)
    payments = list(payments)
    return [
        calculate_monthly_admin_summary(bills, payments, f"{year}-{m:02d}", today)
        for m in range(1, 13)
    ]


def calculate_admin_billing_summary(bills: Iterable, payments: Iterable) -> BillingSummaryOut:
    bills = list(bills)
    total_amount = sum((bill_total(b) for b in bills), 0.0)
    total_paid = accepted_total(payments)
    return BillingSummaryOut(
        total_bills=len(bills),
        total_amount=total_amount,
        total_paid=total_paid,
        total_remaining=total_amount - total_paid,
    )


def calculate_accurate_total_amount(bills: Iterable) -> float:
    total = 0.0
    for bill in bills:
        items = getattr(bill, "items", None) or []
        if not items:
            total += float(bill.amount or 0)
            continue
        total += sum((float(i.amount) for i in items if i.item_type != CARRY_OVER), 0.0)
    return total


def calculate_accurate_billing_summary(bills: Iterable, payments: Iterable) -> AccurateBillingSummaryOut:
    total_amount = calculate_accurate_total_amount(bills)
    total_paid = accepted_total(payments)
    return AccurateBillingSummaryOut(
        total_amount=total_amount,
        total_paid=total_paid,
        remaining_balance=total_amount - total_paid,
    )


def count_unpaid_bills(bills: Iterable, payments: Iterable, today: Optional[date] = None) -> int:
    """Bills that still have something owed and are not settled."""
    payments = list(payments)
    return sum(
        1
        for b in bills
        if calculate_remaining_bill(b, payments) > 0
        and bill_status(b, payments, today) in ("pending", "partial", "overdue")
    )


def calculate_tenant_summary(views: Iterable[BillOut]) -> TenantSummaryOut:
    views = list(views)
    return TenantSummaryOut(
        total_bills=sum((v.amount for v in views), 0.0),
        total_paid=sum((v.total_paid for v in views), 0.0),
        total_remaining=sum((v.remaining for v in views), 0.0),
    )


def split_tenant_bills(views: Iterable[BillOut], today: date) -> TenantBillsOut:
    """Current-month bills, past-month bills and anything due later."""
    views = list(views)
    current = month_key(today)
    return TenantBillsOut(
        summary=calculate_tenant_summary(views),
        current_month=[v for v in views if v.bill_period == current],
        past_months=[v for v in views if v.bill_period < current],
        upcoming=[v for v in views if v.bill_period > current],
    )
