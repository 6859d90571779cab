from jurnext.schemas.user import UserUpsert, UserResponse, RoleUpdate, RoleResponse
from jurnext.schemas.ticket import TicketCreate, TicketResponse, TicketStatusUpdate, AdvertiseUpdate
from jurnext.schemas.booking import (
    BookingCreate, BookingResponse, BookingStatusUpdate,
    BookedTicketResponse, RequestedBookingResponse
)
from jurnext.schemas.payment import (
    CheckoutRequest, CheckoutResponse, PaymentSuccessRequest,
    PaymentSuccessResponse, PaymentResponse, VendorStats
)

__all__ = [
    "UserUpsert", "UserResponse", "RoleUpdate", "RoleResponse",
    "TicketCreate", "TicketResponse", "TicketStatusUpdate", "AdvertiseUpdate",
    "BookingCreate", "BookingResponse", "BookingStatusUpdate",
    "BookedTicketResponse", "RequestedBookingResponse",
    "CheckoutRequest", "CheckoutResponse", "PaymentSuccessRequest",
    "PaymentSuccessResponse", "PaymentResponse", "VendorStats"
]
