from datetime import date, datetime, timezone
from typing import Optional

from app.core.auth import User
from app.models.audit_log import AuditLog
from sqlalchemy.orm import Session


def _compute_risk_level(
    entity_type: str,
    action: str,
    status: Optional[str],
    due_date: Optional[date],
    explicit: Optional[str] = None,
) -> str:
    if explicit:
        return explicit
    if action == "deleted" and entity_type in ("bill", "payment"):
        return "medium"
    if entity_type == "deposit" and status == "forfeited":
        return "medium"
    if due_date is None:
        return "low"
    today = datetime.now(timezone.utc).date()
    if due_date >= today:
        return "low"

    status_l = (status or "").lower()
    if entity_type == "bill" and status_l in ("pending", "partial", "overdue"):
        return "high"
    return "low"


def log_audit(
    db: Session,
    *,
    actor: User,
    action: str,
    entity_type: str,
    entity_id: str,
    source: str = "api",
    status: Optional[str] = None,
    due_date: Optional[date] = None,
    room_id: Optional[str] = None,
    description: Optional[str] = None,
    risk_level: Optional[str] = None,
) -> AuditLog:
    log = AuditLog(
        actor_id=actor.id,
        actor_email=actor.email,
        actor_role=actor.role,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        source=source,
        status=status,
        due_date=due_date,
        room_id=room_id,
        description=description,
        risk_level=_compute_risk_level(entity_type, action, status, due_date, risk_level),
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    return log
