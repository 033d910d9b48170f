from pydantic import BaseModel, field_validator, model_validator
from datetime import date, datetime
from typing import Literal, Optional

from app.schemas.payment import PaymentMethod, check_method_fields

DepositStatus = Literal["active", "refunded", "forfeited"]


class DepositCreate(BaseModel):
    amount: float
    deposit_date: date
    method: PaymentMethod = "in_person"
    reference_number: Optional[str] = None
    received_by: Optional[str] = None
    receipt_image: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("reference_number", "received_by", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("amount")
    @classmethod
    def positive_amount(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("amount must be greater than 0")
        return v

    @model_validator(mode="after")
    def validate_method(self) -> "DepositCreate":
        check_method_fields(self.method, self.reference_number, self.received_by)
        return self


class DepositOut(BaseModel):
    id: str
    tenant_id: str
    room_id: str
    amount: float
    deposit_date: date
    refund_date: Optional[date] = None
    status: DepositStatus
    method: PaymentMethod
    reference_number: Optional[str] = None
    received_by: Optional[str] = None
    receipt_image: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
