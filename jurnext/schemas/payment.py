from pydantic import BaseModel, EmailStr, Field, model_validator
from datetime import datetime
from typing import Optional
from jurnext.schemas.common import PartyInfo, party


class CustomerInfo(BaseModel):
    email: EmailStr
    name: Optional[str] = None


class CheckoutRequest(BaseModel):
    title: str
    image: Optional[str] = None
    price: float = Field(gt=0)
    quantity: int = Field(ge=1)
    ticket_id: int = Field(alias="ticketID")
    booking_id: int = Field(alias="bookingId")
    customer: CustomerInfo

    class Config:
        populate_by_name = True


class CheckoutResponse(BaseModel):
    url: str


class PaymentSuccessRequest(BaseModel):
    session_id: str = Field(alias="sessionId", min_length=1)

    class Config:
        populate_by_name = True


class PaymentSuccessResponse(BaseModel):
    transaction_id: Optional[str] = Field(None, alias="transactionId")
    payment_id: Optional[int] = Field(None, alias="paymentId")

    class Config:
        populate_by_name = True


class PaymentResponse(BaseModel):
    id: int
    transaction_id: str = Field(alias="transactionId")
    ticket_id: int = Field(alias="ticketID")
    booking_id: Optional[int] = Field(None, alias="bookingId")
    customer: PartyInfo
    vendor: Optional[PartyInfo] = None
    quantity: int
    price: float
    paid_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        populate_by_name = True

    @model_validator(mode="before")
    @classmethod
    def nest_parties(cls, data):
        if hasattr(data, "transaction_id"):
            return {
                "id": data.id,
                "transaction_id": data.transaction_id,
                "ticket_id": data.ticket_id,
                "booking_id": data.booking_id,
                "customer": party(data.customer_email, data.customer_name),
                "vendor": party(data.vendor_email, data.vendor_name),
                "quantity": data.quantity,
                "price": data.price,
                "paid_at": data.paid_at,
            }
        return data


class VendorStats(BaseModel):
    tickets_added: int = Field(alias="ticketsAdded")
    tickets_sold: int = Field(alias="ticketsSold")
    revenue: float

    class Config:
        populate_by_name = True
