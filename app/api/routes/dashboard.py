from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.api.bill_views import all_bill_views
from app.api.deps import get_gateway
from app.core.auth import require_admin, User
from app.core.gateway import Gateway
from app.core.summaries import accepted_total, count_unpaid_bills
from app.schemas.summary import AdminDashboardOut

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=AdminDashboardOut)
def admin_dashboard(
    gw: Gateway = Depends(get_gateway),
    current_user: User = Depends(require_admin),
):
    """
    Admin landing cards. Revenue is every accepted payment; pending bills
    are bills with something still owed.
    """
    today = datetime.now(timezone.utc).date()
    rooms = gw.list("rooms")
    payments = gw.list("payments")

    by_status = {"occupied": 0, "available": 0, "maintenance": 0}
    for room in rooms:
        by_status[room.status] = by_status.get(room.status, 0) + 1

    return AdminDashboardOut(
        total_revenue=accepted_total(payments),
        occupied_rooms=by_status["occupied"],
        available_rooms=by_status["available"],
        maintenance_rooms=by_status["maintenance"],
        total_rooms=len(rooms),
        total_tenants=len(gw.list("tenants")),
        pending_bills=count_unpaid_bills(all_bill_views(gw, today), payments, today),
    )
