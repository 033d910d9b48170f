from pydantic import BaseModel, field_validator
from datetime import date, datetime
from typing import Optional

from app.schemas.common import reject_null


class TenantCreate(BaseModel):
    user_id: str
    room_id: str
    name: str
    contact: str
    start_date: date
    emergency_contact_name: Optional[str] = None
    emergency_contact_number: Optional[str] = None
    deposit_amount: Optional[float] = None  # records an active deposit dated start_date

    @field_validator("user_id", "room_id", "name", "contact", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class TenantUpdate(BaseModel):
    room_id: Optional[str] = None
    name: Optional[str] = None
    contact: Optional[str] = None
    start_date: Optional[date] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_number: Optional[str] = None

    @field_validator("room_id", "name", "contact", "start_date", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class TenantOut(BaseModel):
    id: str
    user_id: str
    room_id: str
    name: str
    contact: str
    start_date: date
    emergency_contact_name: Optional[str] = None
    emergency_contact_number: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
