from uuid import uuid4

from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class BillItem(Base):
    __tablename__ = "bill_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))

    bill_id = Column(String(36), ForeignKey("bills.id", ondelete="CASCADE"), nullable=False, index=True)
    bill = relationship("Bill", back_populates="items")

    # room_rent / electricity / water / wifi / remaining_balance
    item_type = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)  # negative = credit carried from an overpaid month
    details = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
