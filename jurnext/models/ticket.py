from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, Enum, JSON, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from jurnext.database import Base
import enum


class TicketStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Ticket(Base):
    __tablename__ = "tickets"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_tickets_quantity_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    from_location = Column(String(200), nullable=True)
    to_location = Column(String(200), nullable=True)
    transport_type = Column(String(50), nullable=True)
    departure_at = Column(DateTime, nullable=True)
    perks = Column(JSON, default=list)
    image = Column(String(500), nullable=True)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    vendor_email = Column(String(255), index=True, nullable=False)
    vendor_name = Column(String(200), nullable=True)
    status = Column(Enum(TicketStatus), default=TicketStatus.PENDING, nullable=False)
    advertise = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    bookings = relationship("Booking", back_populates="ticket")
