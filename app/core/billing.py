"""
Billing math: line items, totals, paid/remaining, status and carry-over.

Every function here is pure. Bills, items and payments are read by attribute
(ORM rows and the pydantic schemas both work), amounts are coerced with
float() so Numeric columns and plain floats mix freely.
"""
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional, Sequence, Union

from app.schemas.bill import BillItemCreate, BillItemOut, ItemAllocationOut

REQUIRED_ITEM_TYPES = ("room_rent", "electricity", "water", "wifi")
CARRY_OVER = "remaining_balance"

STATUS_PENDING = "pending"
STATUS_PARTIAL = "partial"
STATUS_PAID = "paid"
STATUS_OVERDUE = "overdue"
BILL_STATUSES = (STATUS_PAID, STATUS_PARTIAL, STATUS_PENDING, STATUS_OVERDUE)

PAYMENT_ACCEPTED = "accepted"


def carry_over_details(amount: float, previous_month: Optional[str] = None) -> str:
    """Label for a remaining_balance item; the sign decides balance vs credit."""
    if previous_month:
        if amount < 0:
            return f"Credit from Overpayment in {previous_month}"
        return f"Remaining Balance from {previous_month}"
    if amount < 0:
        return "Credit from Overpayment Last Month"
    return "Remaining Balance from Previous Month"


def calculate_bill_items(
    bill_id: Optional[str],
    rent_amount: float,
    electric_amount: float,
    water_amount: float,
    wifi_amount: float,
    remaining_balance: float,
) -> List[BillItemCreate]:
    """
    Rent, electricity, water and wifi items always; a remaining_balance item
    only when the carried balance is non-zero. Inputs are not validated.
    """
    items = [
        BillItemCreate(bill_id=bill_id, item_type="room_rent", amount=rent_amount, details="Room Rent"),
        BillItemCreate(bill_id=bill_id, item_type="electricity", amount=electric_amount, details="Electricity Bill"),
        BillItemCreate(bill_id=bill_id, item_type="water", amount=water_amount, details="Water Bill"),
        BillItemCreate(bill_id=bill_id, item_type="wifi", amount=wifi_amount, details="WiFi Bill"),
    ]
    if remaining_balance != 0:
        items.append(
            BillItemCreate(
                bill_id=bill_id,
                item_type=CARRY_OVER,
                amount=remaining_balance,
                details=carry_over_details(remaining_balance),
            )
        )
    return items


def label_bill_items(
    items: Sequence[BillItemCreate],
    room_number: str,
    electric_usage: float,
    electricity_rate: float,
    previous_month: str,
    currency: str = "₱",
) -> List[BillItemCreate]:
    """Rewrite item details with the room, meter usage and source month of a generated bill."""
    labelled = []
    for item in items:
        if item.item_type == "room_rent":
            details = f"Room Rent: {room_number}"
        elif item.item_type == "electricity":
            details = f"Electricity: {electric_usage:.2f} kWh × {currency}{electricity_rate:.4f}/kWh"
        elif item.item_type == CARRY_OVER:
            details = carry_over_details(item.amount, previous_month)
        else:
            details = item.details
        labelled.append(item.model_copy(update={"details": details}))
    return labelled


def validate_bill_items(items: Iterable) -> bool:
    """True when rent, electricity, water and wifi are all present."""
    item_types = {item.item_type for item in items}
    return all(t in item_types for t in REQUIRED_ITEM_TYPES)


def calculate_total_bill(items: Iterable) -> float:
    return sum((float(item.amount) for item in items), 0.0)


def bill_total(bill) -> float:
    """Items sum when the bill is itemised, the stored amount otherwise (manual bills)."""
    items = getattr(bill, "items", None) or []
    if items:
        return calculate_total_bill(items)
    return float(bill.amount or 0)


def calculate_total_paid(bill, payments: Iterable) -> float:
    """Sum of accepted payments for this bill. Pending and declined payments never count."""
    return sum(
        (
            float(p.amount_paid)
            for p in payments
            if p.bill_id == bill.id and p.status == PAYMENT_ACCEPTED
        ),
        0.0,
    )


def calculate_remaining_bill(bill, payments: Iterable) -> float:
    """Total minus accepted payments. Not clamped: negative means the bill was overpaid."""
    return bill_total(bill) - calculate_total_paid(bill, payments)


def _as_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def derive_bill_status(
    total_paid: float,
    total_bill: float,
    due_date: Union[date, datetime],
    today: Optional[date] = None,
) -> str:
    if today is None:
        today = datetime.now(timezone.utc).date()
    if total_paid >= total_bill:
        return STATUS_PAID
    if total_paid > 0:
        return STATUS_PARTIAL
    if _as_date(today) > _as_date(due_date):
        return STATUS_OVERDUE
    return STATUS_PENDING


def bill_status(bill, payments: Iterable, today: Optional[date] = None) -> str:
    payments = list(payments)
    return derive_bill_status(
        calculate_total_paid(bill, payments),
        bill_total(bill),
        bill.due_date,
        today,
    )


def refresh_carry_over(current_items: Iterable, previous_bill, payments: Iterable) -> List[BillItemOut]:
    """
    Re-derive the remaining_balance item of a bill from what is still owed on
    the previous bill. Without a previous bill the items come back unchanged.
    A zero balance drops the item; otherwise it is updated in place or appended.
    """
    items = [BillItemOut.model_validate(item) for item in current_items]
    if previous_bill is None:
        return items

    actual = calculate_remaining_bill(previous_bill, payments)
    existing = next((i for i, item in enumerate(items) if item.item_type == CARRY_OVER), None)

    if actual == 0:
        if existing is not None:
            del items[existing]
        return items

    if existing is not None:
        if items[existing].amount != actual:
            items[existing] = items[existing].model_copy(
                update={"amount": actual, "details": carry_over_details(actual)}
            )
        return items

    bill_id = items[0].bill_id if items else None
    items.append(
        BillItemOut(
            bill_id=bill_id,
            item_type=CARRY_OVER,
            amount=actual,
            details=carry_over_details(actual),
        )
    )
    return items


def allocate_payment(items: Iterable, total_bill: float, total_paid: float) -> List[ItemAllocationOut]:
    """
    Split what has been paid across the items in proportion to each item's
    share of the bill. A zero bill total allocates nothing.
    """
    allocations = []
    for item in items:
        amount = float(item.amount)
        share = amount / total_bill if total_bill else 0.0
        paid = total_paid * share
        allocations.append(
            ItemAllocationOut(
                item_type=item.item_type,
                amount=amount,
                paid=paid,
                remaining=amount - paid,
                details=item.details,
            )
        )
    return allocations
