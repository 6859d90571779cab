from pydantic import BaseModel, Field, model_validator
from datetime import datetime
from typing import Optional
from jurnext.schemas.common import PartyInfo, party


class BookingCreate(BaseModel):
    ticket_id: int = Field(alias="ticketID")
    quantity: int = Field(1, ge=1)

    class Config:
        populate_by_name = True


class BookingStatusUpdate(BaseModel):
    status: str = Field(min_length=1)


class BookingResponse(BaseModel):
    id: int
    ticket_id: int = Field(alias="ticketID")
    customer: PartyInfo
    vendor: PartyInfo
    quantity: int
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        populate_by_name = True

    @model_validator(mode="before")
    @classmethod
    def nest_parties(cls, data):
        if hasattr(data, "customer_email"):
            return {
                "id": data.id,
                "ticket_id": data.ticket_id,
                "customer": party(data.customer_email, data.customer_name),
                "vendor": party(data.vendor_email, data.vendor_name),
                "quantity": data.quantity,
                "status": data.status,
                "created_at": data.created_at,
            }
        return data


class BookedTicketDetails(BaseModel):
    """Ticket fields shown to the customer next to a booking."""
    title: str
    from_location: Optional[str] = Field(None, alias="from")
    to_location: Optional[str] = Field(None, alias="to")
    departure_at: Optional[datetime] = Field(None, alias="departure")
    image: Optional[str] = None
    price: float
    status: str

    class Config:
        populate_by_name = True


class BookedTicketResponse(BaseModel):
    id: int
    vendor: PartyInfo
    quantity: int
    status: str
    created_at: Optional[datetime] = None
    ticket_details: BookedTicketDetails = Field(alias="ticketDetails")

    class Config:
        populate_by_name = True


class RequestedBookingResponse(BaseModel):
    id: int
    customer: PartyInfo
    vendor: PartyInfo
    status: str
    quantity: int
    ticket_price: float = Field(alias="ticketPrice")
    ticket_title: str = Field(alias="ticketTitle")

    class Config:
        populate_by_name = True
