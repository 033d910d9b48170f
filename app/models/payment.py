from uuid import uuid4

from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))

    bill_id = Column(String(36), ForeignKey("bills.id", ondelete="CASCADE"), nullable=False, index=True)
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    bill = relationship("Bill", back_populates="payments")
    tenant = relationship("Tenant", back_populates="payments")

    amount_paid = Column(Numeric(10, 2), nullable=False)
    payment_date = Column(Date, nullable=False, index=True)
    method = Column(String, nullable=False)  # gcash / bank / in_person
    reference_number = Column(String, nullable=True)
    received_by = Column(String, nullable=True)
    receipt_image = Column(String, nullable=True)
    status = Column(String, nullable=False, default="pending", index=True)  # pending / accepted / declined

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now(), nullable=False)
