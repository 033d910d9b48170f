from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import List, Optional

from app.core.periods import parse_month_key
from app.schemas.common import reject_null


def _normalise_month(v: str) -> str:
    year, month = parse_month_key(v)
    return f"{year}-{month:02d}"


class BillingRateCreate(BaseModel):
    month_year: str  # "2024-03"
    electricity_rate: float  # per kWh
    water_rate: float = 0.0
    wifi_rate: float = 0.0

    @field_validator("month_year")
    @classmethod
    def check_month_key(cls, v: str) -> str:
        return _normalise_month(v)


class BillingRateUpdate(BaseModel):
    electricity_rate: Optional[float] = None
    water_rate: Optional[float] = None
    wifi_rate: Optional[float] = None

    @field_validator("electricity_rate", "water_rate", "wifi_rate", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class BillingRateOut(BaseModel):
    id: str
    month_year: str
    electricity_rate: float
    water_rate: float
    wifi_rate: float
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ElectricReadingCreate(BaseModel):
    room_id: str
    month_year: str
    reading: float  # cumulative meter value

    @field_validator("month_year")
    @classmethod
    def check_month_key(cls, v: str) -> str:
        return _normalise_month(v)


class ElectricReadingUpdate(BaseModel):
    room_id: Optional[str] = None
    month_year: Optional[str] = None
    reading: Optional[float] = None

    @field_validator("room_id", "month_year", "reading", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

    @field_validator("month_year")
    @classmethod
    def check_month_key(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _normalise_month(v)


class ElectricReadingOut(BaseModel):
    id: str
    room_id: str
    month_year: str
    reading: float
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BulkReadingIn(BaseModel):
    room_id: str
    reading: Optional[str] = None  # blank entries are skipped

    @field_validator("reading", mode="before")
    @classmethod
    def to_text(cls, v):
        if v is None:
            return v
        return str(v).strip()


class BulkReadingsIn(BaseModel):
    month_year: str
    readings: List[BulkReadingIn] = []

    @field_validator("month_year")
    @classmethod
    def check_month_key(cls, v: str) -> str:
        return _normalise_month(v)


class BulkReadingsOut(BaseModel):
    month_year: str
    created: int = 0
    updated: int = 0
    readings: List[ElectricReadingOut] = []
