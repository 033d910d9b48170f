from uuid import uuid4

from sqlalchemy import Column, String, Integer, DateTime, Boolean, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Room(Base):
    __tablename__ = "rooms"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))

    room_number = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False)
    rent_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String, nullable=False, default="available", index=True)  # available / occupied / maintenance
    description = Column(String, nullable=True)

    # Electric meter
    electric_meter_number = Column(String, nullable=True)
    initial_electric_reading = Column(Numeric(12, 2), nullable=True, default=0)
    electric_included = Column(Boolean, nullable=False, default=False)

    max_occupancy = Column(Integer, nullable=False, default=1)
    deposit_amount = Column(Numeric(10, 2), nullable=False, default=0)

    tenants = relationship("Tenant", back_populates="room")
    electric_readings = relationship("ElectricReading", back_populates="room", cascade="all, delete")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now(), nullable=False)
