import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Header, BackgroundTasks
from sqlalchemy.orm import Session

from jurnext.config import Settings
from jurnext.database import get_db
from jurnext.dependencies import get_app_settings, get_checkout_gateway
from jurnext.middleware.security import limiter
from jurnext.schemas.payment import (
    CheckoutRequest, CheckoutResponse, PaymentSuccessRequest,
    PaymentSuccessResponse, PaymentResponse, VendorStats
)
from jurnext.services.booking import BookingService
from jurnext.services.catalog import CatalogService
from jurnext.services.email import EmailService
from jurnext.services.gateway import CheckoutGateway
from jurnext.services.identity import (
    Principal, get_current_principal, get_current_vendor, customer_owns_booking
)
from jurnext.services.payment import PaymentService, ReconciliationResult

router = APIRouter(tags=["payments"])
logger = logging.getLogger(__name__)


def _queue_receipt(
    background_tasks: BackgroundTasks,
    db: Session,
    settings: Settings,
    result: ReconciliationResult
):
    payment = result.payment
    ticket = CatalogService.get_ticket(db, payment.ticket_id)
    background_tasks.add_task(
        EmailService.send_payment_receipt,
        settings,
        payment.customer_email,
        payment.customer_name,
        ticket.title if ticket else "your trip",
        payment.quantity,
        payment.price,
        payment.transaction_id
    )


@router.post("/create-checkout-session", response_model=CheckoutResponse)
@limiter.limit("20/minute")
async def create_checkout_session(
    request: Request,
    checkout: CheckoutRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
    gateway: CheckoutGateway = Depends(get_checkout_gateway),
    settings: Settings = Depends(get_app_settings)
):
    booking = BookingService.get_booking(db, checkout.booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")

    if not customer_owns_booking(principal, booking):
        raise HTTPException(status_code=403, detail="Not authorized")

    if not BookingService.is_payable(booking):
        raise HTTPException(status_code=400, detail=f"Booking is {booking.status} and cannot be paid")

    if checkout.ticket_id != booking.ticket_id:
        raise HTTPException(status_code=400, detail="Ticket does not match the booking")

    if checkout.quantity != booking.quantity:
        raise HTTPException(status_code=400, detail="Quantity does not match the booking")

    ticket = CatalogService.get_ticket(db, booking.ticket_id)
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")

    url = PaymentService.create_checkout_session(
        gateway=gateway,
        settings=settings,
        ticket=ticket,
        booking=booking,
        title=checkout.title,
        image=checkout.image,
        quantity=booking.quantity,
        customer_email=checkout.customer.email,
        customer_name=checkout.customer.name
    )
    return {"url": url}


@router.post(
    "/payment-success",
    response_model=PaymentSuccessResponse,
    response_model_exclude_none=True
)
async def payment_success(
    payload: PaymentSuccessRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    gateway: CheckoutGateway = Depends(get_checkout_gateway),
    settings: Settings = Depends(get_app_settings)
):
    result = PaymentService.reconcile_session(db, gateway, payload.session_id)

    if not result.applied:
        return {"transaction_id": result.transaction_id}

    _queue_receipt(background_tasks, db, settings, result)
    return {"transaction_id": result.transaction_id, "payment_id": result.payment.id}


@router.post("/payments/webhook")
async def stripe_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    stripe_signature: str = Header(None, alias="stripe-signature"),
    db: Session = Depends(get_db),
    gateway: CheckoutGateway = Depends(get_checkout_gateway),
    settings: Settings = Depends(get_app_settings)
):
    if not stripe_signature:
        raise HTTPException(status_code=400, detail="Missing signature")

    payload = await request.body()

    try:
        event = gateway.verify_webhook(payload, stripe_signature)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid signature")

    if event["type"] == "checkout.session.completed":
        session_id = event["data"]["object"]["id"]
        result = PaymentService.reconcile_session(db, gateway, session_id)
        if result.applied:
            _queue_receipt(background_tasks, db, settings, result)
    else:
        logger.debug(f"Ignoring webhook event {event['type']}")

    return {"status": "success"}


@router.get("/my-payments", response_model=List[PaymentResponse])
async def my_payments(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db)
):
    return PaymentService.get_customer_payments(db, principal.email)


@router.get("/vendor-stats", response_model=VendorStats)
async def vendor_stats(
    vendor: Principal = Depends(get_current_vendor),
    db: Session = Depends(get_db)
):
    return PaymentService.get_vendor_stats(db, vendor.email)
