import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import IntegrityError
from typing import List, Optional

from app.api.deps import get_gateway
from app.core.auth import require_admin, User
from app.core.audit import log_audit
from app.core.bill_generation import generate_monthly_bills
from app.core.gateway import Gateway
from app.schemas.bill import GenerateBillsIn, GenerateBillsOut
from app.schemas.billing import (
    BillingRateCreate,
    BillingRateUpdate,
    BillingRateOut,
    BulkReadingIn,
    BulkReadingsIn,
    BulkReadingsOut,
    ElectricReadingCreate,
    ElectricReadingUpdate,
    ElectricReadingOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/billing", tags=["billing"])


# --- Billing rates ---

@router.get("/rates", response_model=List[BillingRateOut])
def list_rates(
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    return gw.list("billing_rates", order_by="month_year", descending=True)


@router.post("/rates", response_model=BillingRateOut, status_code=201)
def create_rate(
    payload: BillingRateCreate,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    if gw.first("billing_rates", month_year=payload.month_year):
        raise HTTPException(status_code=409, detail=f"Billing rates for {payload.month_year} already exist")
    rate = gw.insert("billing_rates", payload.model_dump())
    log_audit(
        gw.db,
        actor=current_user,
        action="created",
        entity_type="billing_rate",
        entity_id=rate.id,
        description=f"Billing rates set for {rate.month_year}",
    )
    return rate


@router.patch("/rates/{rate_id}", response_model=BillingRateOut)
def update_rate(
    rate_id: str,
    payload: BillingRateUpdate,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    rate = gw.update("billing_rates", rate_id, payload.model_dump(exclude_unset=True))
    if not rate:
        raise HTTPException(status_code=404, detail="Billing rate not found")
    log_audit(
        gw.db,
        actor=current_user,
        action="updated",
        entity_type="billing_rate",
        entity_id=rate.id,
        description=f"Billing rates updated for {rate.month_year}",
    )
    return rate


@router.delete("/rates/{rate_id}")
def delete_rate(
    rate_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    if not gw.delete("billing_rates", rate_id):
        raise HTTPException(status_code=404, detail="Billing rate not found")
    return {"ok": True}


# --- Electric readings ---

@router.get("/readings", response_model=List[ElectricReadingOut])
def list_readings(
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
    month_year: Optional[str] = Query(None, description="YYYY-MM"),
    room_id: Optional[str] = Query(None),
):
    filters = {}
    if month_year:
        filters["month_year"] = month_year
    if room_id:
        filters["room_id"] = room_id
    return gw.list("electric_readings", order_by="month_year", descending=True, **filters)


@router.get("/readings/bulk-form", response_model=List[BulkReadingIn])
def bulk_readings_form(
    month_year: str = Query(..., description="YYYY-MM"),
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    """One row per occupied room, prefilled with the month's reading when it exists."""
    existing = {r.room_id: r for r in gw.list("electric_readings", month_year=month_year)}
    rows = []
    for room in gw.list("rooms", status="occupied", order_by="room_number"):
        reading = existing.get(room.id)
        rows.append(BulkReadingIn(room_id=room.id, reading=float(reading.reading) if reading else None))
    return rows


@router.post("/readings", response_model=ElectricReadingOut, status_code=201)
def create_reading(
    payload: ElectricReadingCreate,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    if not gw.get("rooms", payload.room_id):
        raise HTTPException(status_code=404, detail="Room not found")
    if gw.first("electric_readings", room_id=payload.room_id, month_year=payload.month_year):
        raise HTTPException(status_code=409, detail="A reading for this room and month already exists")
    return gw.insert("electric_readings", payload.model_dump())


@router.post("/readings/bulk", response_model=BulkReadingsOut)
def save_bulk_readings(
    payload: BulkReadingsIn,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    """Upsert one reading per room for the month; blank entries are ignored."""
    entries = [r for r in payload.readings if r.reading]
    if not entries:
        raise HTTPException(status_code=400, detail="Please enter at least one reading")

    existing = {r.room_id: r for r in gw.list("electric_readings", month_year=payload.month_year)}
    result = BulkReadingsOut(month_year=payload.month_year)
    saved = []
    try:
        for entry in entries:
            try:
                value = float(entry.reading)
            except ValueError:
                raise HTTPException(status_code=400, detail=f"Invalid reading for room {entry.room_id}: {entry.reading}")
            current = existing.get(entry.room_id)
            if current is not None:
                current.reading = value
                saved.append(current)
                result.updated += 1
            else:
                saved.append(
                    gw.insert(
                        "electric_readings",
                        {"room_id": entry.room_id, "month_year": payload.month_year, "reading": value},
                        commit=False,
                    )
                )
                result.created += 1
        gw.commit()
    except IntegrityError:
        gw.db.rollback()
        logger.exception("Bulk reading save failed for %s", payload.month_year)
        raise HTTPException(status_code=400, detail="Some readings failed to save. Please try again.")
    except HTTPException:
        gw.db.rollback()
        raise

    for reading in saved:
        gw.db.refresh(reading)
    result.readings = [ElectricReadingOut.model_validate(r) for r in saved]
    return result


@router.patch("/readings/{reading_id}", response_model=ElectricReadingOut)
def update_reading(
    reading_id: str,
    payload: ElectricReadingUpdate,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    try:
        reading = gw.update("electric_readings", reading_id, payload.model_dump(exclude_unset=True))
    except IntegrityError:
        gw.db.rollback()
        raise HTTPException(status_code=409, detail="A reading for this room and month already exists")
    if not reading:
        raise HTTPException(status_code=404, detail="Electric reading not found")
    return reading


@router.delete("/readings/{reading_id}")
def delete_reading(
    reading_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    if not gw.delete("electric_readings", reading_id):
        raise HTTPException(status_code=404, detail="Electric reading not found")
    return {"ok": True}


# --- Bill generation ---

@router.post("/generate", response_model=GenerateBillsOut, status_code=201)
def generate_bills(
    payload: GenerateBillsIn,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    """
    Generate the monthly bills for every tenant in an occupied room.
    Rooms without a reading for the month are skipped and reported.
    """
    result = generate_monthly_bills(gw, payload.month_year)
    for bill in result.generated:
        log_audit(
            gw.db,
            actor=current_user,
            action="created",
            entity_type="bill",
            entity_id=bill.id,
            status=bill.status,
            due_date=bill.due_date,
            room_id=bill.room_id,
            source="billing_run",
            description=f"Monthly bill {payload.month_year}: {bill.amount:.2f}",
        )
    return result
