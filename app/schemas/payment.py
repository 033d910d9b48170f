from pydantic import BaseModel, field_validator, model_validator
from datetime import date, datetime
from typing import Literal, Optional

from app.schemas.common import reject_null

PaymentMethod = Literal["gcash", "bank", "in_person"]
PaymentStatus = Literal["pending", "accepted", "declined"]


def check_method_fields(method: Optional[str], reference_number: Optional[str], received_by: Optional[str]) -> None:
    """in_person needs who received it; gcash/bank need a reference number."""
    if method == "in_person":
        if not received_by:
            raise ValueError("received_by is required for in_person payments")
    elif method is not None and not reference_number:
        raise ValueError("reference_number is required for gcash and bank payments")


class PaymentCreate(BaseModel):
    bill_id: str
    tenant_id: Optional[str] = None  # defaults to the bill's tenant
    amount_paid: float
    payment_date: date
    method: PaymentMethod
    reference_number: Optional[str] = None
    received_by: Optional[str] = None
    receipt_image: Optional[str] = None
    status: PaymentStatus = "accepted"  # admin-entered payments are usually already received

    @field_validator("reference_number", "received_by", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("amount_paid")
    @classmethod
    def positive_amount(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("amount_paid must be greater than 0")
        return v

    @model_validator(mode="after")
    def validate_method(self) -> "PaymentCreate":
        check_method_fields(self.method, self.reference_number, self.received_by)
        return self


class TenantPaymentCreate(BaseModel):
    """Submitted from the tenant portal; always stored as pending."""
    bill_id: str
    amount_paid: Optional[float] = None  # defaults to the bill's remaining balance
    payment_date: Optional[date] = None  # defaults to today
    method: PaymentMethod
    reference_number: Optional[str] = None
    received_by: Optional[str] = None
    receipt_image: Optional[str] = None

    @field_validator("reference_number", "received_by", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("amount_paid")
    @classmethod
    def positive_amount(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("amount_paid must be greater than 0")
        return v

    @model_validator(mode="after")
    def validate_method(self) -> "TenantPaymentCreate":
        check_method_fields(self.method, self.reference_number, self.received_by)
        return self


class PaymentUpdate(BaseModel):
    bill_id: Optional[str] = None
    tenant_id: Optional[str] = None
    amount_paid: Optional[float] = None
    payment_date: Optional[date] = None
    method: Optional[PaymentMethod] = None
    reference_number: Optional[str] = None
    received_by: Optional[str] = None
    receipt_image: Optional[str] = None
    status: Optional[PaymentStatus] = None

    @field_validator("bill_id", "tenant_id", "amount_paid", "payment_date", "method", "status", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

    @field_validator("amount_paid")
    @classmethod
    def positive_amount(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("amount_paid must be greater than 0")
        return v


class PaymentOut(BaseModel):
    id: str
    bill_id: str
    tenant_id: str
    amount_paid: float
    payment_date: date
    method: PaymentMethod
    reference_number: Optional[str] = None
    received_by: Optional[str] = None
    receipt_image: Optional[str] = None
    status: PaymentStatus
    created_at: datetime

    class Config:
        from_attributes = True
