from typing import Optional, List
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from jurnext.models.ticket import Ticket, TicketStatus
from jurnext.models.user import User

logger = logging.getLogger(__name__)


class AdvertiseLimitReached(Exception):
    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Limit reached! You cannot advertise more than {limit} tickets.")


def _fraud_vendor_emails():
    return select(User.email).where(User.fraud.is_(True))


class CatalogService:
    @staticmethod
    def get_ticket(db: Session, ticket_id: int) -> Optional[Ticket]:
        return db.query(Ticket).filter(Ticket.id == ticket_id).first()

    @staticmethod
    def create_ticket(db: Session, data: dict, vendor_email: str, vendor_name: Optional[str]) -> Ticket:
        ticket = Ticket(
            **data,
            vendor_email=vendor_email,
            vendor_name=vendor_name,
            status=TicketStatus.PENDING,
            advertise=False
        )
        db.add(ticket)
        db.commit()
        db.refresh(ticket)
        logger.info(f"Ticket {ticket.id} submitted by {vendor_email}")
        return ticket

    @staticmethod
    def get_approved_tickets(db: Session) -> List[Ticket]:
        """Approved tickets, hiding vendors flagged as fraud."""
        return db.query(Ticket).filter(
            Ticket.status == TicketStatus.APPROVED,
            Ticket.vendor_email.not_in(_fraud_vendor_emails())
        ).order_by(Ticket.created_at.desc(), Ticket.id.desc()).all()

    @staticmethod
    def get_advertised_tickets(db: Session) -> List[Ticket]:
        return db.query(Ticket).filter(
            Ticket.status == TicketStatus.APPROVED,
            Ticket.advertise.is_(True),
            Ticket.vendor_email.not_in(_fraud_vendor_emails())
        ).order_by(Ticket.id).all()

    @staticmethod
    def get_all_tickets(db: Session) -> List[Ticket]:
        return db.query(Ticket).order_by(Ticket.id).all()

    @staticmethod
    def get_vendor_tickets(db: Session, vendor_email: str) -> List[Ticket]:
        return db.query(Ticket).filter(
            Ticket.vendor_email == vendor_email
        ).order_by(Ticket.id).all()

    @staticmethod
    def set_status(db: Session, ticket_id: int, status: TicketStatus) -> bool:
        """Returns False when no ticket changed."""
        updated = db.query(Ticket).filter(
            Ticket.id == ticket_id,
            Ticket.status != status
        ).update({"status": status}, synchronize_session=False)
        db.commit()
        return updated > 0

    @staticmethod
    def count_advertised(db: Session) -> int:
        return db.query(Ticket).filter(Ticket.advertise.is_(True)).count()

    @staticmethod
    def set_advertise(db: Session, ticket: Ticket, advertise: bool, limit: int) -> Ticket:
        """
        Admit or withdraw a ticket from the advertised slots.
        Count and write are separate statements, so two concurrent admissions
        can both pass the check.
        """
        if advertise and not ticket.advertise:
            advertised = CatalogService.count_advertised(db)
            if advertised >= limit:
                logger.info(f"Advertise request for ticket {ticket.id} rejected, {advertised} already advertised")
                raise AdvertiseLimitReached(limit)

        ticket.advertise = advertise
        db.commit()
        db.refresh(ticket)
        return ticket

    @staticmethod
    def decrement_quantity(db: Session, ticket_id: int, quantity: int) -> bool:
        """
        Take seats out of inventory only if enough remain.
        Does not commit. Returns False when the condition failed.
        """
        if quantity <= 0:
            return False
        updated = db.query(Ticket).filter(
            Ticket.id == ticket_id,
            Ticket.quantity >= quantity
        ).update({"quantity": Ticket.quantity - quantity}, synchronize_session=False)
        return updated > 0
