from jurnext.routers.users import router as users_router
from jurnext.routers.tickets import router as tickets_router
from jurnext.routers.bookings import router as bookings_router
from jurnext.routers.payments import router as payments_router
from jurnext.routers.admin import router as admin_router

__all__ = [
    "users_router",
    "tickets_router",
    "bookings_router",
    "payments_router",
    "admin_router"
]
