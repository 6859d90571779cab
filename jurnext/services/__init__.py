from jurnext.services.users import UserService
from jurnext.services.catalog import CatalogService
from jurnext.services.booking import BookingService
from jurnext.services.payment import PaymentService
from jurnext.services.email import EmailService

__all__ = ["UserService", "CatalogService", "BookingService", "PaymentService", "EmailService"]
