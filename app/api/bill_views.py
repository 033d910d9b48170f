from datetime import date
from typing import List, Optional

from app.core.gateway import Gateway
from app.core.ledger import build_bill_views
from app.schemas.bill import BillOut


def all_bill_views(gw: Gateway, today: Optional[date] = None) -> List[BillOut]:
    """Every bill, refreshed, newest due date first."""
    views = build_bill_views(gw.list("bills"), gw.list("payments"), today)
    return sorted(views, key=lambda v: v.due_date, reverse=True)


def tenant_bill_views(gw: Gateway, tenant_id: str, today: Optional[date] = None) -> List[BillOut]:
    bills = gw.list("bills", tenant_id=tenant_id)
    bill_ids = {b.id for b in bills}
    # Payments count towards the bill they settle, whoever they are filed under
    payments = [p for p in gw.list("payments") if p.bill_id in bill_ids]
    views = build_bill_views(bills, payments, today)
    return sorted(views, key=lambda v: v.due_date, reverse=True)


def find_bill_view(gw: Gateway, bill_id: str, today: Optional[date] = None) -> Optional[BillOut]:
    bill = gw.get("bills", bill_id)
    if bill is None:
        return None
    views = tenant_bill_views(gw, bill.tenant_id, today)
    return next((v for v in views if v.id == bill_id), None)
