from typing import Optional, List
import logging

from sqlalchemy.orm import Session

from jurnext.models.booking import Booking, BookingStatus
from jurnext.models.ticket import Ticket

logger = logging.getLogger(__name__)


class BookingService:
    @staticmethod
    def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.id == booking_id).first()

    @staticmethod
    def create_booking(
        db: Session,
        ticket: Ticket,
        quantity: int,
        customer_email: str,
        customer_name: Optional[str]
    ) -> Booking:
        booking = Booking(
            ticket_id=ticket.id,
            customer_email=customer_email,
            customer_name=customer_name,
            vendor_email=ticket.vendor_email,
            vendor_name=ticket.vendor_name,
            quantity=quantity,
            status=BookingStatus.PENDING.value
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        logger.info(f"Booking {booking.id} created for ticket {ticket.id} by {customer_email}")
        return booking

    @staticmethod
    def get_customer_bookings(db: Session, customer_email: str) -> List[dict]:
        """Bookings of a customer joined with the booked ticket's details."""
        rows = db.query(Booking, Ticket).join(
            Ticket, Booking.ticket_id == Ticket.id
        ).filter(
            Booking.customer_email == customer_email
        ).order_by(Booking.id).all()

        return [
            {
                "id": booking.id,
                "vendor": {"email": booking.vendor_email, "name": booking.vendor_name},
                "quantity": booking.quantity,
                "status": booking.status,
                "created_at": booking.created_at,
                "ticket_details": {
                    "title": ticket.title,
                    "from_location": ticket.from_location,
                    "to_location": ticket.to_location,
                    "departure_at": ticket.departure_at,
                    "image": ticket.image,
                    "price": ticket.price,
                    "status": ticket.status.value
                }
            }
            for booking, ticket in rows
        ]

    @staticmethod
    def get_vendor_requests(db: Session, vendor_email: str) -> List[dict]:
        """Booking requests on a vendor's tickets, with the ticket's title and price."""
        rows = db.query(Booking, Ticket.title, Ticket.price).join(
            Ticket, Booking.ticket_id == Ticket.id
        ).filter(
            Booking.vendor_email == vendor_email
        ).order_by(Booking.id).all()

        return [
            {
                "id": booking.id,
                "customer": {"email": booking.customer_email, "name": booking.customer_name},
                "vendor": {"email": booking.vendor_email, "name": booking.vendor_name},
                "status": booking.status,
                "quantity": booking.quantity,
                "ticket_price": price,
                "ticket_title": title
            }
            for booking, title, price in rows
        ]

    @staticmethod
    def is_payable(booking: Booking) -> bool:
        return booking.status not in (BookingStatus.PAID.value, BookingStatus.REJECTED.value)

    @staticmethod
    def set_status(db: Session, booking_id: int, status: str) -> bool:
        """
        Vendor status change. Paid bookings are never changed here.
        Returns False when no booking changed.
        """
        updated = db.query(Booking).filter(
            Booking.id == booking_id,
            Booking.status != BookingStatus.PAID.value,
            Booking.status != status
        ).update({"status": status}, synchronize_session=False)
        db.commit()
        return updated > 0
