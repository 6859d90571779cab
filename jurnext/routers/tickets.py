from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from jurnext.database import get_db
from jurnext.schemas.ticket import TicketCreate, TicketResponse
from jurnext.services.catalog import CatalogService
from jurnext.services.identity import Principal, get_current_vendor

router = APIRouter(tags=["tickets"])


@router.post("/tickets", response_model=TicketResponse, status_code=201)
async def add_ticket(
    ticket_data: TicketCreate,
    vendor: Principal = Depends(get_current_vendor),
    db: Session = Depends(get_db)
):
    if vendor.fraud:
        raise HTTPException(status_code=403, detail="Vendor is marked as fraud")

    return CatalogService.create_ticket(
        db, ticket_data.model_dump(), vendor.email, vendor.name
    )


@router.get("/approved-tickets", response_model=List[TicketResponse])
async def approved_tickets(db: Session = Depends(get_db)):
    return CatalogService.get_approved_tickets(db)


@router.get("/advertised-tickets", response_model=List[TicketResponse])
async def advertised_tickets(db: Session = Depends(get_db)):
    return CatalogService.get_advertised_tickets(db)


@router.get("/added-tickets", response_model=List[TicketResponse])
async def added_tickets(
    vendor: Principal = Depends(get_current_vendor),
    db: Session = Depends(get_db)
):
    return CatalogService.get_vendor_tickets(db, vendor.email)


@router.get("/tickets/{ticket_id}", response_model=TicketResponse)
async def get_ticket(ticket_id: int, db: Session = Depends(get_db)):
    ticket = CatalogService.get_ticket(db, ticket_id)
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return ticket
