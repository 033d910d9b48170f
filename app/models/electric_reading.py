from uuid import uuid4

from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class ElectricReading(Base):
    __tablename__ = "electric_readings"
    __table_args__ = (UniqueConstraint("room_id", "month_year", name="uq_electric_readings_room_month"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))

    room_id = Column(String(36), ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    room = relationship("Room", back_populates="electric_readings")

    month_year = Column(String(7), nullable=False, index=True)
    reading = Column(Numeric(12, 2), nullable=False)  # cumulative meter units

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now(), nullable=False)
