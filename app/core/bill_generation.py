"""
Monthly bill generation.

For every tenant in an occupied room: rent + metered electricity + flat
water/wifi, plus whatever is still owed (or credited) on the tenant's
previous-month bill. One bill per tenant per month.
"""
import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException

from app.core.billing import calculate_bill_items, calculate_total_bill, label_bill_items
from app.core.config import settings
from app.core.gateway import Gateway
from app.core.ledger import build_bill_view, build_bill_views, period_bill
from app.core.periods import due_date_for_month, monthly_description, previous_month
from app.schemas.bill import GenerateBillsOut, SkippedRoomOut

logger = logging.getLogger(__name__)


def electric_usage(current_reading, previous_reading) -> float:
    """Units consumed this month; 0 when there is no previous reading to diff against."""
    if previous_reading is None:
        return 0.0
    return float(current_reading.reading) - float(previous_reading.reading)


def carried_balance(gw: Gateway, tenant_id: str, month: str, payments, today: Optional[date] = None) -> float:
    """Remaining balance of the tenant's bill for `month`; negative is a credit, 0 when there is no bill."""
    views = build_bill_views(gw.list("bills", tenant_id=tenant_id, order_by="due_date"), payments, today)
    prev = period_bill(views, month)
    if prev is None:
        logger.info("No %s bill for tenant %s, nothing carried over", month, tenant_id)
        return 0.0
    return prev.remaining


def generate_monthly_bills(gw: Gateway, month: str, today: Optional[date] = None) -> GenerateBillsOut:
    rate = gw.first("billing_rates", month_year=month)
    if not rate:
        raise HTTPException(status_code=404, detail=f"Billing rates not found for {month}")

    description = monthly_description(month)
    if gw.first("bills", description=description):
        raise HTTPException(status_code=409, detail=f"Bills for {month} have already been generated")

    prev_month = previous_month(month)
    due_date = due_date_for_month(month, settings.BILL_DUE_DAYS_BEFORE_MONTH_END)

    rooms = {room.id: room for room in gw.list("rooms")}
    current_readings = {r.room_id: r for r in gw.list("electric_readings", month_year=month)}
    previous_readings = {r.room_id: r for r in gw.list("electric_readings", month_year=prev_month)}
    payments = gw.list("payments")

    result = GenerateBillsOut(month_year=month, due_date=due_date)
    generated = []

    for tenant in gw.list("tenants", order_by="name"):
        room = rooms.get(tenant.room_id)
        if room is None or room.status != "occupied":
            continue

        current = current_readings.get(room.id)
        if current is None:
            logger.warning("No electric reading for room %s in %s, skipping", room.room_number, month)
            result.skipped.append(
                SkippedRoomOut(
                    room_id=room.id,
                    room_number=room.room_number,
                    tenant_id=tenant.id,
                    reason=f"No electric reading for {month}",
                )
            )
            continue

        usage = electric_usage(current, previous_readings.get(room.id))
        electricity_rate = float(rate.electricity_rate)
        balance = carried_balance(gw, tenant.id, prev_month, payments, today)

        items = calculate_bill_items(
            None,
            float(room.rent_amount),
            round(usage * electricity_rate, 2),
            float(rate.water_rate),
            float(rate.wifi_rate),
            balance,
        )
        items = label_bill_items(
            items,
            room.room_number,
            usage,
            electricity_rate,
            prev_month,
            settings.CURRENCY_SYMBOL,
        )

        bill = gw.insert(
            "bills",
            {
                "tenant_id": tenant.id,
                "room_id": room.id,
                "amount": calculate_total_bill(items),
                "due_date": due_date,
                "description": description,
            },
            commit=False,
        )
        for item in items:
            gw.insert("bill_items", {**item.model_dump(), "bill_id": bill.id}, commit=False)
        gw.commit()
        logger.info(
            "Generated bill %s for tenant %s (room %s): %.2f incl. carry-over %.2f",
            bill.id, tenant.id, room.room_number, calculate_total_bill(items), balance,
        )
        generated.append(bill)

    result.generated = [build_bill_view(bill, None, payments, today) for bill in generated]
    logger.info("Generated %d bills for %s, skipped %d rooms", len(generated), month, len(result.skipped))
    return result
