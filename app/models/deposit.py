from uuid import uuid4

from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Deposit(Base):
    __tablename__ = "deposits"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))

    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    room_id = Column(String(36), ForeignKey("rooms.id"), nullable=False, index=True)
    tenant = relationship("Tenant", back_populates="deposits")

    amount = Column(Numeric(10, 2), nullable=False)
    deposit_date = Column(Date, nullable=False)
    refund_date = Column(Date, nullable=True)
    status = Column(String, nullable=False, default="active", index=True)  # active / refunded / forfeited
    method = Column(String, nullable=False)  # gcash / bank / in_person
    reference_number = Column(String, nullable=True)
    received_by = Column(String, nullable=True)
    receipt_image = Column(String, nullable=True)
    notes = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now(), nullable=False)
