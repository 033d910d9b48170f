from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import List, Literal, Optional

from app.schemas.bill import BillOut
from app.schemas.common import reject_null
from app.schemas.payment import PaymentOut
from app.schemas.tenant import TenantOut

RoomStatus = Literal["available", "occupied", "maintenance"]


class RoomCreate(BaseModel):
    room_number: str
    type: str
    rent_amount: float
    status: RoomStatus = "available"
    description: Optional[str] = None
    electric_meter_number: Optional[str] = None
    initial_electric_reading: float = 0.0
    electric_included: bool = False
    max_occupancy: int = 1
    deposit_amount: float = 0.0

    @field_validator("room_number", "type", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("rent_amount", "deposit_amount")
    @classmethod
    def non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("amount cannot be negative")
        return v


class RoomUpdate(BaseModel):
    room_number: Optional[str] = None
    type: Optional[str] = None
    rent_amount: Optional[float] = None
    status: Optional[RoomStatus] = None
    description: Optional[str] = None
    electric_meter_number: Optional[str] = None
    initial_electric_reading: Optional[float] = None
    electric_included: Optional[bool] = None
    max_occupancy: Optional[int] = None
    deposit_amount: Optional[float] = None

    @field_validator(
        "room_number", "type", "rent_amount", "status", "electric_included", "max_occupancy", "deposit_amount",
        mode="before",
    )
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class RoomOut(BaseModel):
    id: str
    room_number: str
    type: str
    rent_amount: float
    status: RoomStatus
    description: Optional[str] = None
    electric_meter_number: Optional[str] = None
    initial_electric_reading: Optional[float] = None
    electric_included: bool
    max_occupancy: int
    deposit_amount: float
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RoomDetailsOut(BaseModel):
    room: RoomOut
    tenant: Optional[TenantOut] = None
    bills: List[BillOut] = []  # newest due date first
    payments: List[PaymentOut] = []  # newest payment date first
