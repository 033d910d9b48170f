from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.auth import require_admin, User
from app.models.audit_log import AuditLog
from app.schemas.audit_log import AuditLogOut

router = APIRouter(prefix="/audit-logs", tags=["audit-logs"])

UNPAID_STATUSES = ("pending", "partial", "overdue")


def _is_overdue(log: AuditLog) -> bool:
    """Entry about a bill that was still unpaid when its due date passed."""
    if not log.due_date:
        return False
    today = datetime.now(timezone.utc).date()
    return log.due_date < today and (log.status or "").lower() in UNPAID_STATUSES


def _parse_datetime(value: str) -> datetime:
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid date-time '{value}'")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@router.get("", response_model=List[AuditLogOut])
def list_audit_logs(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
    start_date: Optional[str] = Query(None, description="ISO date-time"),
    end_date: Optional[str] = Query(None, description="ISO date-time"),
    actor: Optional[str] = Query(None, description="Filter by actor email"),
    entity_type: Optional[str] = Query(None, description="room|tenant|bill|payment|deposit|billing_rate|electric_reading"),
    action: Optional[str] = Query(None),
    source: Optional[str] = Query(None, description="api|billing_run|tenant_portal"),
    room_id: Optional[str] = Query(None),
    risk_level: Optional[str] = Query(None, description="low|medium|high"),
    high_risk_only: Optional[bool] = Query(False),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    q = db.query(AuditLog)

    if start_date:
        q = q.filter(AuditLog.created_at >= _parse_datetime(start_date))
    if end_date:
        q = q.filter(AuditLog.created_at <= _parse_datetime(end_date))
    if actor:
        q = q.filter(AuditLog.actor_email == actor)
    if entity_type:
        q = q.filter(AuditLog.entity_type == entity_type)
    if action:
        q = q.filter(AuditLog.action == action)
    if source:
        q = q.filter(AuditLog.source == source)
    if room_id:
        q = q.filter(AuditLog.room_id == room_id)
    if risk_level:
        q = q.filter(AuditLog.risk_level == risk_level)

    logs = q.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).offset(offset).limit(limit).all()

    if high_risk_only:
        logs = [l for l in logs if _is_overdue(l) or l.risk_level == "high"]
    return logs


@router.get("/stats")
def audit_log_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    now = datetime.now(timezone.utc)
    start_today = now.replace(hour=0, minute=0, second=0, microsecond=0)

    total = db.query(AuditLog).count()
    today = db.query(AuditLog).filter(AuditLog.created_at >= start_today).count()
    deletions = db.query(AuditLog).filter(AuditLog.action == "deleted").count()
    declined = db.query(AuditLog).filter(
        AuditLog.entity_type == "payment", AuditLog.action == "declined"
    ).count()

    logs = db.query(AuditLog).all()
    high_risk = sum(1 for l in logs if _is_overdue(l) or l.risk_level == "high")

    return {
        "total": total,
        "today": today,
        "high_risk": high_risk,
        "deletions": deletions,
        "declined_payments": declined,
    }
