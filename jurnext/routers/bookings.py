from typing import List

from fastapi import APIRouter, Depends, HTTPException, BackgroundTasks
from sqlalchemy.orm import Session

from jurnext.config import Settings
from jurnext.database import get_db
from jurnext.dependencies import get_app_settings
from jurnext.models.booking import BookingStatus
from jurnext.models.ticket import TicketStatus
from jurnext.schemas.booking import (
    BookingCreate, BookingResponse, BookingStatusUpdate,
    BookedTicketResponse, RequestedBookingResponse
)
from jurnext.services.booking import BookingService
from jurnext.services.catalog import CatalogService
from jurnext.services.email import EmailService
from jurnext.services.identity import (
    Principal, get_current_principal, get_current_vendor, vendor_owns_booking
)

router = APIRouter(tags=["bookings"])


@router.post("/book-ticket", response_model=BookingResponse, status_code=201)
async def book_ticket(
    booking_data: BookingCreate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    ticket = CatalogService.get_ticket(db, booking_data.ticket_id)
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")

    if ticket.status != TicketStatus.APPROVED:
        raise HTTPException(status_code=400, detail="Ticket is not available for booking")

    if booking_data.quantity > ticket.quantity:
        raise HTTPException(status_code=400, detail=f"Only {ticket.quantity} tickets available")

    return BookingService.create_booking(
        db, ticket, booking_data.quantity, principal.email, principal.name
    )


@router.get("/booked-tickets", response_model=List[BookedTicketResponse])
async def booked_tickets(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return BookingService.get_customer_bookings(db, principal.email)


@router.get("/requested-booking", response_model=List[RequestedBookingResponse])
async def requested_bookings(
    vendor: Principal = Depends(get_current_vendor),
    db: Session = Depends(get_db)
):
    return BookingService.get_vendor_requests(db, vendor.email)


@router.patch("/booking-status/{booking_id}", response_model=BookingResponse)
async def update_booking_status(
    booking_id: int,
    payload: BookingStatusUpdate,
    background_tasks: BackgroundTasks,
    vendor: Principal = Depends(get_current_vendor),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
):
    if payload.status == BookingStatus.PAID.value:
        raise HTTPException(status_code=400, detail="Bookings are marked paid by checkout only")

    booking = BookingService.get_booking(db, booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")

    if not vendor_owns_booking(vendor, booking):
        raise HTTPException(status_code=403, detail="Not authorized")

    if not BookingService.set_status(db, booking_id, payload.status):
        raise HTTPException(status_code=404, detail="Status update failed")

    db.refresh(booking)

    background_tasks.add_task(
        EmailService.send_booking_status_update,
        settings,
        booking.customer_email,
        booking.customer_name,
        booking.ticket.title,
        booking.status
    )

    return booking
