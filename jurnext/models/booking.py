from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from jurnext.database import Base
import enum


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    PAID = "Paid"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id"), nullable=False)
    customer_email = Column(String(255), index=True, nullable=False)
    customer_name = Column(String(200), nullable=True)
    vendor_email = Column(String(255), index=True, nullable=False)
    vendor_name = Column(String(200), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    # vendors may use states outside BookingStatus, so this stays a plain string
    status = Column(String(50), nullable=False, default=BookingStatus.PENDING.value)
    created_at = Column(DateTime, server_default=func.now())

    ticket = relationship("Ticket", back_populates="bookings")
