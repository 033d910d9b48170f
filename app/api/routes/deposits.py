from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from app.api.deps import get_gateway
from app.core.auth import require_admin, User
from app.core.audit import log_audit
from app.core.gateway import Gateway
from app.schemas.deposit import DepositOut

router = APIRouter(prefix="/deposits", tags=["deposits"])


def _close_deposit(gw: Gateway, deposit_id: str, new_status: str, current_user: User):
    """Move an active deposit to refunded/forfeited. Closed deposits cannot change again."""
    deposit = gw.get("deposits", deposit_id)
    if not deposit:
        raise HTTPException(status_code=404, detail="Deposit not found")
    if deposit.status != "active":
        raise HTTPException(status_code=400, detail=f"Deposit is already {deposit.status}")

    patch = {"status": new_status}
    if new_status == "refunded":
        patch["refund_date"] = datetime.now(timezone.utc).date()
    deposit = gw.update("deposits", deposit_id, patch)

    log_audit(
        gw.db,
        actor=current_user,
        action=new_status,
        entity_type="deposit",
        entity_id=deposit.id,
        status=deposit.status,
        room_id=deposit.room_id,
        description=f"Deposit {new_status}: {float(deposit.amount):.2f}",
    )
    return deposit


@router.get("", response_model=List[DepositOut])
def list_deposits(
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
    tenant_id: Optional[str] = Query(None),
    status: Optional[str] = Query(None, description="active|refunded|forfeited"),
):
    filters = {}
    if tenant_id:
        filters["tenant_id"] = tenant_id
    if status:
        filters["status"] = status
    return gw.list("deposits", order_by="deposit_date", descending=True, **filters)


@router.post("/{deposit_id}/refund", response_model=DepositOut)
def refund_deposit(
    deposit_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    return _close_deposit(gw, deposit_id, "refunded", current_user)


@router.post("/{deposit_id}/forfeit", response_model=DepositOut)
def forfeit_deposit(
    deposit_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    return _close_deposit(gw, deposit_id, "forfeited", current_user)


@router.delete("/{deposit_id}")
def delete_deposit(
    deposit_id: str,
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    deposit = gw.get("deposits", deposit_id)
    if not deposit:
        raise HTTPException(status_code=404, detail="Deposit not found")
    room_id = deposit.room_id
    gw.delete("deposits", deposit_id)
    log_audit(
        gw.db,
        actor=current_user,
        action="deleted",
        entity_type="deposit",
        entity_id=deposit_id,
        room_id=room_id,
        description="Deposit deleted",
    )
    return {"ok": True}
