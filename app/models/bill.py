from uuid import uuid4

from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Bill(Base):
    __tablename__ = "bills"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))

    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    room_id = Column(String(36), ForeignKey("rooms.id"), nullable=False, index=True)
    tenant = relationship("Tenant", back_populates="bills")

    # Stored total at write time; reads recompute it from items
    amount = Column(Numeric(10, 2), nullable=False, default=0)
    due_date = Column(Date, nullable=False, index=True)
    description = Column(String, nullable=True, index=True)  # "Monthly Bill - 2024-03" for generated bills

    items = relationship("BillItem", back_populates="bill", cascade="all, delete")
    payments = relationship("Payment", back_populates="bill", cascade="all, delete")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now(), nullable=False)
