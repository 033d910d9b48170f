from pydantic import BaseModel
from typing import List

from app.schemas.bill import BillOut


class StatusCounts(BaseModel):
    """Bills per derived status; every status is always present."""
    paid: int = 0
    partial: int = 0
    pending: int = 0
    overdue: int = 0


class BillingSummaryOut(BaseModel):
    """Overall billing cards on the admin bills page."""
    total_bills: int = 0
    total_amount: float = 0.0
    total_paid: float = 0.0
    total_remaining: float = 0.0


class AccurateBillingSummaryOut(BaseModel):
    """Totals that leave carried remaining_balance items out, so a balance is not counted twice."""
    total_amount: float = 0.0
    total_paid: float = 0.0
    remaining_balance: float = 0.0


class MonthlySummaryOut(BaseModel):
    """One month card. Revenue is accepted payments dated in the month."""
    month_key: str
    month_name: str
    total_bills: int = 0
    total_amount: float = 0.0
    total_paid: float = 0.0
    remaining: float = 0.0
    revenue: float = 0.0
    status_counts: StatusCounts = StatusCounts()


class AdminDashboardOut(BaseModel):
    total_revenue: float = 0.0
    occupied_rooms: int = 0
    available_rooms: int = 0
    maintenance_rooms: int = 0
    total_rooms: int = 0
    total_tenants: int = 0
    pending_bills: int = 0


class TenantSummaryOut(BaseModel):
    total_bills: float = 0.0
    total_paid: float = 0.0
    total_remaining: float = 0.0


class TenantBillsOut(BaseModel):
    summary: TenantSummaryOut = TenantSummaryOut()
    current_month: List[BillOut] = []
    past_months: List[BillOut] = []
    upcoming: List[BillOut] = []


class TenantDashboardOut(BaseModel):
    monthly_rent: float = 0.0
    pending_bills_count: int = 0
    pending_total: float = 0.0
    total_paid: float = 0.0
