from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.sql import func
from jurnext.database import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    # payment intent id from the checkout provider
    transaction_id = Column(String(255), unique=True, index=True, nullable=False)
    ticket_id = Column(Integer, ForeignKey("tickets.id"), nullable=False)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=True)
    customer_email = Column(String(255), index=True, nullable=False)
    customer_name = Column(String(200), nullable=True)
    vendor_email = Column(String(255), index=True, nullable=True)
    vendor_name = Column(String(200), nullable=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    paid_at = Column(DateTime, server_default=func.now())
