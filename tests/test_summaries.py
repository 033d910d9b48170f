from datetime import date
from types import SimpleNamespace

from app.core.ledger import build_bill_view, build_bill_views, with_allocations
from app.core.summaries import (
    calculate_accurate_billing_summary,
    calculate_admin_billing_summary,
    calculate_monthly_admin_summary,
    calculate_tenant_summary,
    calculate_year_summaries,
    count_unpaid_bills,
    split_tenant_bills,
)
from app.schemas.bill import BillItemOut

TODAY = date(2024, 4, 10)


def item(item_type, amount, bill_id):
    return BillItemOut(bill_id=bill_id, item_type=item_type, amount=amount)


def bill(bill_id, due_date, items=(), amount=0, tenant_id="t1", description=None):
    return SimpleNamespace(
        id=bill_id,
        tenant_id=tenant_id,
        room_id="r1",
        amount=amount,
        due_date=due_date,
        description=description,
        items=list(items),
        created_at=None,
        updated_at=None,
    )


def payment(bill_id, amount, payment_date, status="accepted"):
    return SimpleNamespace(bill_id=bill_id, amount_paid=amount, payment_date=payment_date, status=status)


def test_monthly_summary_filters_bills_and_payments_by_their_own_month():
    march = bill("mar", date(2024, 3, 27), [item("room_rent", 1000, "mar")])
    february = bill("feb", date(2024, 2, 25), [item("room_rent", 800, "feb")])
    payments = [
        payment("feb", 300, date(2024, 3, 5)),  # February bill, paid in March
        payment("mar", 1000, date(2024, 4, 2)),  # March bill, paid in April
        payment("mar", 50, date(2024, 3, 10), status="pending"),
    ]

    summary = calculate_monthly_admin_summary([march, february], payments, "2024-03", today=TODAY)

    assert summary.month_key == "2024-03"
    assert summary.month_name == "March 2024"
    assert summary.total_bills == 1
    assert summary.total_amount == 1000
    assert summary.revenue == 300
    assert summary.total_paid == 300
    assert summary.remaining == 700
    assert summary.status_counts.paid == 1
    assert summary.status_counts.overdue == 0


def test_monthly_summary_for_empty_month_has_all_status_counts():
    summary = calculate_monthly_admin_summary([], [], "2024-07", today=TODAY)
    assert summary.total_bills == 0
    assert summary.status_counts.model_dump() == {"paid": 0, "partial": 0, "pending": 0, "overdue": 0}


def test_year_summaries_cover_twelve_months():
    summaries = calculate_year_summaries([], [], 2024, today=TODAY)
    assert [s.month_key for s in summaries][:3] == ["2024-01", "2024-02", "2024-03"]
    assert len(summaries) == 12


def test_accurate_summary_leaves_out_carried_balances():
    bills = [
        bill("a", date(2024, 3, 27), [item("room_rent", 1000, "a"), item("remaining_balance", 200, "a")]),
        bill("b", date(2024, 3, 27), amount=500),
    ]
    payments = [payment("a", 400, date(2024, 3, 20))]

    overall = calculate_admin_billing_summary(bills, payments)
    accurate = calculate_accurate_billing_summary(bills, payments)

    assert overall.total_bills == 2
    assert overall.total_amount == 1700
    assert overall.total_remaining == 1300
    assert accurate.total_amount == 1500
    assert accurate.remaining_balance == 1100


def test_count_unpaid_bills():
    bills = [
        bill("paid", date(2024, 3, 27), amount=100),
        bill("partial", date(2024, 3, 27), amount=100),
        bill("open", date(2024, 5, 27), amount=100),
    ]
    payments = [payment("paid", 100, date(2024, 3, 1)), payment("partial", 40, date(2024, 3, 1))]
    assert count_unpaid_bills(bills, payments, today=TODAY) == 2


# --- Read-side views ---

def test_views_refresh_carry_over_from_previous_period():
    february = bill("feb", date(2024, 2, 25), [item("room_rent", 1000, "feb")])
    # carry-over stored at generation time, before the February payment came in
    march = bill("mar", date(2024, 3, 27), [item("room_rent", 1000, "mar"), item("remaining_balance", 1000, "mar")])
    payments = [payment("feb", 600, date(2024, 3, 1))]

    views = build_bill_views([march, february], payments, today=date(2024, 3, 10))

    assert [v.id for v in views] == ["mar", "feb"]
    mar_view, feb_view = views
    assert feb_view.remaining == 400
    assert feb_view.status == "partial"
    assert mar_view.items[-1].amount == 400
    assert mar_view.amount == 1400
    assert mar_view.remaining == 1400
    assert mar_view.status == "pending"
    assert mar_view.bill_period == "2024-03"


def test_carry_over_prefers_the_generated_monthly_bill():
    # a manual bill due earlier in March must not shadow the monthly one
    fee = bill("fee", date(2024, 3, 5), amount=500)
    monthly = bill(
        "mar", date(2024, 3, 27), [item("room_rent", 1000, "mar")], description="Monthly Bill - 2024-03"
    )
    april = bill("apr", date(2024, 4, 26), [item("room_rent", 1000, "apr")])
    payments = [payment("mar", 600, date(2024, 3, 20))]

    views = build_bill_views([fee, monthly, april], payments, today=TODAY)

    apr_view = views[2]
    assert apr_view.items[-1].item_type == "remaining_balance"
    assert apr_view.items[-1].amount == 400
    assert apr_view.amount == 1400


def test_carry_over_falls_back_to_earliest_bill_of_the_month():
    fee = bill("fee", date(2024, 3, 5), amount=500)
    later = bill("later", date(2024, 3, 20), amount=200)
    april = bill("apr", date(2024, 4, 26), [item("room_rent", 1000, "apr")])

    views = build_bill_views([fee, later, april], [], today=TODAY)

    assert views[2].items[-1].amount == 500


def test_views_are_independent_per_tenant():
    a_feb = bill("a-feb", date(2024, 2, 25), [item("room_rent", 1000, "a-feb")], tenant_id="a")
    b_mar = bill("b-mar", date(2024, 3, 27), [item("room_rent", 700, "b-mar")], tenant_id="b")
    views = build_bill_views([a_feb, b_mar], [], today=TODAY)
    assert views[1].amount == 700
    assert [i.item_type for i in views[1].items] == ["room_rent"]


def test_manual_bill_keeps_its_amount():
    view = build_bill_view(bill("m", date(2024, 5, 1), amount=1500), None, [], today=TODAY)
    assert view.items == []
    assert view.amount == 1500
    assert view.status == "pending"


def test_with_allocations_splits_paid_amount():
    b = bill("x", date(2024, 3, 27), [item("room_rent", 750, "x"), item("water", 250, "x")])
    view = build_bill_view(b, None, [payment("x", 400, date(2024, 3, 2))], today=TODAY)
    detail = with_allocations(view)
    assert [round(a.paid, 2) for a in detail.allocations] == [300, 100]
    assert detail.total_paid == 400


def test_tenant_summary_and_split():
    bills = [
        bill("old", date(2024, 3, 27), amount=1000),
        bill("now", date(2024, 4, 25), amount=900),
        bill("next", date(2024, 5, 25), amount=800),
    ]
    views = build_bill_views(bills, [payment("old", 1000, date(2024, 3, 20))], today=TODAY)

    summary = calculate_tenant_summary(views)
    assert summary.total_bills == 2700
    assert summary.total_paid == 1000
    assert summary.total_remaining == 1700

    split = split_tenant_bills(views, TODAY)
    assert [v.id for v in split.current_month] == ["now"]
    assert [v.id for v in split.past_months] == ["old"]
    assert [v.id for v in split.upcoming] == ["next"]
    assert split.summary.total_remaining == 1700
