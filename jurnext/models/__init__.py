from jurnext.models.user import User
from jurnext.models.ticket import Ticket
from jurnext.models.booking import Booking
from jurnext.models.payment import Payment

__all__ = ["User", "Ticket", "Booking", "Payment"]
