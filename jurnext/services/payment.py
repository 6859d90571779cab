from dataclasses import dataclass
from typing import Optional, List
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from jurnext.config import Settings
from jurnext.models.booking import Booking, BookingStatus
from jurnext.models.payment import Payment
from jurnext.models.ticket import Ticket
from jurnext.services.catalog import CatalogService
from jurnext.services.gateway import CheckoutGateway, CheckoutSession, LineItem

logger = logging.getLogger(__name__)

SESSION_COMPLETE = "complete"


@dataclass
class ReconciliationResult:
    transaction_id: Optional[str]
    payment: Optional[Payment] = None
    skipped_reason: Optional[str] = None
    inventory_applied: bool = False

    @property
    def applied(self) -> bool:
        return self.payment is not None


class PaymentService:
    @staticmethod
    def create_checkout_session(
        gateway: CheckoutGateway,
        settings: Settings,
        ticket: Ticket,
        booking: Booking,
        title: str,
        image: Optional[str],
        quantity: int,
        customer_email: str,
        customer_name: Optional[str]
    ) -> str:
        """
        Create a hosted checkout session for a booking.
        The unit price comes from the catalog, never from the caller.
        Returns the checkout session URL.
        """
        line_item = LineItem(
            name=title,
            image=image,
            unit_amount=int(round(ticket.price * 100)),
            quantity=quantity
        )
        metadata = {
            "ticketID": ticket.id,
            "bookingId": booking.id,
            "customerEmail": customer_email,
            "customerName": customer_name or "",
            "quantity": quantity
        }
        success_url = f"{settings.client_domain}/payment-success?session_id={{CHECKOUT_SESSION_ID}}"
        cancel_url = f"{settings.client_domain}/dashboard/my-booked-tickets"

        session = gateway.create_session(line_item, metadata, success_url, cancel_url)
        logger.info(f"Checkout session {session.id} created for booking {booking.id}")
        return session.url

    @staticmethod
    def get_payment_by_transaction_id(db: Session, transaction_id: str) -> Optional[Payment]:
        return db.query(Payment).filter(Payment.transaction_id == transaction_id).first()

    @staticmethod
    def reconcile_session(db: Session, gateway: CheckoutGateway, session_id: str) -> ReconciliationResult:
        """Fetch the authoritative session from the gateway and apply it."""
        session = gateway.retrieve_session(session_id)
        return PaymentService.apply_completed_session(db, session)

    @staticmethod
    def apply_completed_session(db: Session, session: CheckoutSession) -> ReconciliationResult:
        """
        Record a completed checkout session.

        The payment insert, inventory decrement and booking update commit
        together. Sessions that are not complete, reference a missing ticket,
        or were already recorded are skipped without writing anything.
        """
        transaction_id = session.payment_intent
        metadata = session.metadata or {}

        if session.status != SESSION_COMPLETE:
            return PaymentService._skip(session, transaction_id, "session not complete")

        if not transaction_id:
            return PaymentService._skip(session, transaction_id, "missing payment intent")

        try:
            ticket_id = int(metadata.get("ticketID"))
            quantity = int(metadata.get("quantity"))
            booking_id = metadata.get("bookingId")
            booking_id = int(booking_id) if booking_id not in (None, "") else None
        except (TypeError, ValueError):
            return PaymentService._skip(session, transaction_id, "malformed metadata")

        customer_email = metadata.get("customerEmail")
        if not customer_email:
            return PaymentService._skip(session, transaction_id, "malformed metadata")

        ticket = CatalogService.get_ticket(db, ticket_id)
        if not ticket:
            return PaymentService._skip(session, transaction_id, f"ticket {ticket_id} not found")

        if PaymentService.get_payment_by_transaction_id(db, transaction_id):
            return PaymentService._skip(session, transaction_id, "already recorded")

        payment = Payment(
            transaction_id=transaction_id,
            ticket_id=ticket.id,
            booking_id=booking_id,
            customer_email=customer_email,
            customer_name=metadata.get("customerName") or None,
            vendor_email=ticket.vendor_email,
            vendor_name=ticket.vendor_name,
            quantity=quantity,
            price=(session.amount_total or 0) / 100
        )

        try:
            db.add(payment)
            db.flush()

            inventory_applied = CatalogService.decrement_quantity(db, ticket.id, quantity)

            if booking_id is not None:
                db.query(Booking).filter(
                    Booking.id == booking_id,
                    Booking.status != BookingStatus.PAID.value
                ).update({"status": BookingStatus.PAID.value}, synchronize_session=False)

            db.commit()
        except IntegrityError:
            db.rollback()
            # a concurrent completion recorded the same transaction first
            if PaymentService.get_payment_by_transaction_id(db, transaction_id):
                return PaymentService._skip(session, transaction_id, "already recorded")
            logger.exception(f"Failed to record payment {transaction_id}; rolled back")
            raise
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Failed to record payment {transaction_id}; rolled back")
            raise

        db.refresh(payment)

        if not inventory_applied:
            logger.warning(
                f"Payment {transaction_id} recorded but ticket {ticket.id} has fewer than "
                f"{quantity} seats left; inventory not decremented"
            )

        logger.info(f"Payment {transaction_id} recorded as {payment.id} for session {session.id}")
        return ReconciliationResult(
            transaction_id=transaction_id,
            payment=payment,
            inventory_applied=inventory_applied
        )

    @staticmethod
    def _skip(session: CheckoutSession, transaction_id: Optional[str], reason: str) -> ReconciliationResult:
        logger.info(f"Skipping checkout session {session.id}: {reason}")
        return ReconciliationResult(transaction_id=transaction_id, skipped_reason=reason)

    @staticmethod
    def get_customer_payments(db: Session, email: str) -> List[Payment]:
        return db.query(Payment).filter(
            Payment.customer_email == email
        ).order_by(Payment.paid_at.desc(), Payment.id.desc()).all()

    @staticmethod
    def get_vendor_stats(db: Session, email: str) -> dict:
        tickets_added = db.query(Ticket).filter(Ticket.vendor_email == email).count()

        sold, revenue = db.query(
            func.coalesce(func.sum(Payment.quantity), 0),
            func.coalesce(func.sum(Payment.price), 0)
        ).filter(Payment.vendor_email == email).one()

        return {
            "tickets_added": tickets_added,
            "tickets_sold": int(sold),
            "revenue": float(revenue)
        }
