from uuid import uuid4

from sqlalchemy import Column, String, DateTime, Numeric
from sqlalchemy.sql import func
from app.core.database import Base


class BillingRate(Base):
    __tablename__ = "billing_rates"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))

    month_year = Column(String(7), nullable=False, unique=True, index=True)  # "2024-03"
    electricity_rate = Column(Numeric(10, 4), nullable=False)  # per kWh
    water_rate = Column(Numeric(10, 2), nullable=False, default=0)  # flat per month
    wifi_rate = Column(Numeric(10, 2), nullable=False, default=0)  # flat per month

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now(), nullable=False)
