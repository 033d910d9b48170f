from uuid import uuid4

from sqlalchemy import Column, String, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))

    # Subject of the Supabase auth user this tenant logs in as
    user_id = Column(String, nullable=False, unique=True, index=True)
    room_id = Column(String(36), ForeignKey("rooms.id"), nullable=False, index=True)
    room = relationship("Room", back_populates="tenants")

    name = Column(String, nullable=False)
    contact = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    emergency_contact_name = Column(String, nullable=True)
    emergency_contact_number = Column(String, nullable=True)

    bills = relationship("Bill", back_populates="tenant", cascade="all, delete")
    payments = relationship("Payment", back_populates="tenant", cascade="all, delete")
    deposits = relationship("Deposit", back_populates="tenant", cascade="all, delete")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now(), nullable=False)
