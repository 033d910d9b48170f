from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from app.core.periods import parse_month_key
from app.schemas.common import reject_null

ItemType = Literal["room_rent", "electricity", "water", "wifi", "remaining_balance"]
BillStatus = Literal["pending", "partial", "paid", "overdue"]


class BillItemCreate(BaseModel):
    bill_id: Optional[str] = None  # filled in once the bill row exists
    item_type: ItemType
    amount: float  # signed; negative remaining_balance is a credit
    details: Optional[str] = None


class BillItemOut(BaseModel):
    id: Optional[str] = None  # None for carry-over items computed on read
    bill_id: Optional[str] = None
    item_type: ItemType
    amount: float
    details: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ItemAllocationOut(BaseModel):
    """Share of the bill's accepted payments attributed to one item."""
    item_type: ItemType
    amount: float
    paid: float
    remaining: float
    details: Optional[str] = None


class BillCreate(BaseModel):
    tenant_id: str
    room_id: Optional[str] = None  # defaults to the tenant's room
    amount: float = 0.0  # used only when no items are given (manual bill)
    due_date: date
    description: Optional[str] = None
    items: List[BillItemCreate] = Field(default_factory=list)

    @field_validator("description", mode="before")
    @classmethod
    def strip_description(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v


class BillUpdate(BaseModel):
    amount: Optional[float] = None
    due_date: Optional[date] = None
    description: Optional[str] = None
    items: Optional[List[BillItemCreate]] = None  # replaces all stored items when given

    @field_validator("amount", "due_date", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class BillOut(BaseModel):
    id: str
    tenant_id: str
    room_id: str
    amount: float  # items sum when itemised, stored amount otherwise
    due_date: date
    description: Optional[str] = None
    status: BillStatus  # derived from payments and due date
    bill_period: str
    total_paid: float = 0.0
    remaining: float = 0.0
    items: List[BillItemOut] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BillDetailOut(BillOut):
    allocations: List[ItemAllocationOut] = Field(default_factory=list)


class GenerateBillsIn(BaseModel):
    month_year: str  # "2024-03"

    @field_validator("month_year")
    @classmethod
    def check_month_key(cls, v: str) -> str:
        year, month = parse_month_key(v)
        return f"{year}-{month:02d}"


class SkippedRoomOut(BaseModel):
    room_id: str
    room_number: str
    tenant_id: str
    reason: str


class GenerateBillsOut(BaseModel):
    month_year: str
    due_date: date
    generated: List[BillOut] = Field(default_factory=list)
    skipped: List[SkippedRoomOut] = Field(default_factory=list)
