from datetime import date
from types import SimpleNamespace

import pytest

from app.core.billing import (
    allocate_payment,
    bill_status,
    calculate_bill_items,
    calculate_remaining_bill,
    calculate_total_bill,
    calculate_total_paid,
    derive_bill_status,
    label_bill_items,
    refresh_carry_over,
    validate_bill_items,
)
from app.schemas.bill import BillItemOut

PAST_DUE = date(2024, 3, 27)
TODAY = date(2024, 4, 10)


def item(item_type, amount, bill_id="b1", details=None):
    return BillItemOut(bill_id=bill_id, item_type=item_type, amount=amount, details=details)


def bill(bill_id="b1", items=(), amount=0, due_date=PAST_DUE):
    return SimpleNamespace(id=bill_id, items=list(items), amount=amount, due_date=due_date)


def payment(amount, status="accepted", bill_id="b1", payment_date=date(2024, 3, 20)):
    return SimpleNamespace(bill_id=bill_id, amount_paid=amount, status=status, payment_date=payment_date)


# --- Item calculator ---

def test_bill_items_without_carry_over():
    items = calculate_bill_items("b1", 5000, 300, 200, 150, 0)
    assert [i.item_type for i in items] == ["room_rent", "electricity", "water", "wifi"]
    assert calculate_total_bill(items) == 5650
    assert all(i.bill_id == "b1" for i in items)


def test_bill_items_with_remaining_balance():
    items = calculate_bill_items("b1", 5000, 300, 200, 150, 250)
    assert len(items) == 5
    assert calculate_total_bill(items) == 5900
    assert items[-1].item_type == "remaining_balance"
    assert items[-1].details == "Remaining Balance from Previous Month"


def test_bill_items_with_credit():
    items = calculate_bill_items("b1", 5000, 300, 200, 150, -100)
    assert len(items) == 5
    assert calculate_total_bill(items) == 5750
    assert items[-1].amount == -100
    assert "Credit from Overpayment" in items[-1].details


def test_bill_items_do_not_validate_inputs():
    items = calculate_bill_items(None, -10, 0, 0, 0, 0)
    assert items[0].amount == -10


def test_label_bill_items_for_generated_bill():
    items = calculate_bill_items(None, 5000, 1250, 200, 150, 600)
    labelled = label_bill_items(items, "101", 100, 12.5, "2024-03")
    details = [i.details for i in labelled]
    assert details[0] == "Room Rent: 101"
    assert details[1] == "Electricity: 100.00 kWh × ₱12.5000/kWh"
    assert details[2] == "Water Bill"
    assert details[-1] == "Remaining Balance from 2024-03"
    # originals are left alone
    assert items[0].details == "Room Rent"


def test_label_credit_item():
    items = calculate_bill_items(None, 5000, 0, 0, 0, -50)
    labelled = label_bill_items(items, "101", 0, 10, "2024-02", currency="$")
    assert labelled[-1].details == "Credit from Overpayment in 2024-02"
    assert "$10.0000/kWh" in labelled[1].details


def test_validate_bill_items():
    assert validate_bill_items(calculate_bill_items("b1", 1, 1, 1, 1, 0))
    assert not validate_bill_items([item("room_rent", 1), item("water", 1)])


# --- Aggregator ---

def test_total_bill_of_empty_list_is_zero():
    assert calculate_total_bill([]) == 0


def test_total_paid_counts_only_accepted_payments_of_the_bill():
    b = bill(amount=1000)
    payments = [payment(500), payment(200, status="pending"), payment(300, status="declined"), payment(999, bill_id="other")]
    assert calculate_total_paid(b, payments) == 500
    assert calculate_remaining_bill(b, payments) == 500


def test_remaining_uses_items_when_present():
    b = bill(items=[item("room_rent", 800), item("water", 200)], amount=5)
    assert calculate_remaining_bill(b, [payment(300)]) == 700


def test_remaining_falls_back_to_amount_for_manual_bills():
    assert calculate_remaining_bill(bill(amount=1500), [payment(500)]) == 1000


def test_remaining_of_empty_bill_is_zero():
    assert calculate_remaining_bill(bill(amount=0), []) == 0


def test_remaining_is_not_clamped():
    assert calculate_remaining_bill(bill(amount=1000), [payment(1200)]) == -200


# --- Status ---

@pytest.mark.parametrize(
    "paid, due_date, expected",
    [
        (0, PAST_DUE, "overdue"),
        (400, PAST_DUE, "partial"),
        (1000, PAST_DUE, "paid"),
        (1200, PAST_DUE, "paid"),
        (0, date(2024, 5, 1), "pending"),
        (400, date(2024, 5, 1), "partial"),
    ],
)
def test_derive_bill_status(paid, due_date, expected):
    assert derive_bill_status(paid, 1000, due_date, today=TODAY) == expected


def test_not_overdue_on_the_due_date_itself():
    assert derive_bill_status(0, 1000, PAST_DUE, today=PAST_DUE) == "pending"


def test_bill_status_ignores_pending_payments():
    b = bill(amount=1000)
    assert bill_status(b, [payment(1000, status="pending")], today=TODAY) == "overdue"
    assert bill_status(b, [payment(1000)], today=TODAY) == "paid"


# --- Carry-over refresh ---

def test_refresh_without_previous_bill_keeps_items():
    items = [item("room_rent", 5000, bill_id="b2"), item("remaining_balance", 300, bill_id="b2")]
    refreshed = refresh_carry_over(items, None, [])
    assert [(i.item_type, i.amount) for i in refreshed] == [("room_rent", 5000), ("remaining_balance", 300)]


def test_refresh_appends_carry_over_when_missing():
    previous = bill("b1", items=[item("room_rent", 1000)])
    refreshed = refresh_carry_over([item("room_rent", 5000, bill_id="b2")], previous, [payment(700)])
    assert refreshed[-1].item_type == "remaining_balance"
    assert refreshed[-1].amount == 300
    assert refreshed[-1].bill_id == "b2"
    assert refreshed[-1].details == "Remaining Balance from Previous Month"


def test_refresh_updates_stale_carry_over():
    previous = bill("b1", items=[item("room_rent", 1000)])
    current = [item("room_rent", 5000, bill_id="b2"), item("remaining_balance", 1000, bill_id="b2")]
    refreshed = refresh_carry_over(current, previous, [payment(1100)])
    assert refreshed[-1].amount == -100
    assert "Credit from Overpayment" in refreshed[-1].details
    # input items are not mutated
    assert current[-1].amount == 1000


def test_refresh_drops_carry_over_once_previous_bill_is_settled():
    previous = bill("b1", items=[item("room_rent", 1000)])
    current = [item("room_rent", 5000, bill_id="b2"), item("remaining_balance", 400, bill_id="b2")]
    refreshed = refresh_carry_over(current, previous, [payment(1000)])
    assert [i.item_type for i in refreshed] == ["room_rent"]


def test_refresh_accepts_orm_like_rows():
    row = SimpleNamespace(id="i1", bill_id="b2", item_type="water", amount=200, details="Water Bill", created_at=None)
    refreshed = refresh_carry_over([row], None, [])
    assert refreshed[0].id == "i1"
    assert refreshed[0].amount == 200


# --- Allocation ---

def test_allocate_payment_proportionally():
    items = [item("room_rent", 600), item("water", 400)]
    allocations = allocate_payment(items, 1000, 500)
    assert [a.paid for a in allocations] == pytest.approx([300, 200])
    assert [a.remaining for a in allocations] == pytest.approx([300, 200])


def test_allocate_payment_on_zero_total_allocates_nothing():
    allocations = allocate_payment([item("water", 0)], 0, 0)
    assert allocations[0].paid == 0
    assert allocations[0].remaining == 0
