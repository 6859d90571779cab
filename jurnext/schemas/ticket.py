from pydantic import BaseModel, Field, model_validator
from datetime import datetime
from typing import Optional, List
from jurnext.models.ticket import TicketStatus
from jurnext.schemas.common import PartyInfo, party


class TicketCreate(BaseModel):
    title: str = Field(min_length=1)
    from_location: Optional[str] = Field(None, alias="from")
    to_location: Optional[str] = Field(None, alias="to")
    transport_type: Optional[str] = Field(None, alias="transport")
    departure_at: Optional[datetime] = Field(None, alias="departure")
    perks: List[str] = []
    image: Optional[str] = None
    price: float = Field(gt=0)
    quantity: int = Field(ge=0)

    class Config:
        populate_by_name = True


class TicketStatusUpdate(BaseModel):
    status: TicketStatus


class AdvertiseUpdate(BaseModel):
    advertise: bool


class TicketResponse(BaseModel):
    id: int
    title: str
    from_location: Optional[str] = Field(None, alias="from")
    to_location: Optional[str] = Field(None, alias="to")
    transport_type: Optional[str] = Field(None, alias="transport")
    departure_at: Optional[datetime] = Field(None, alias="departure")
    perks: List[str] = []
    image: Optional[str] = None
    price: float
    quantity: int
    vendor: PartyInfo
    status: TicketStatus
    advertise: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        populate_by_name = True

    @model_validator(mode="before")
    @classmethod
    def nest_vendor(cls, data):
        if hasattr(data, "vendor_email"):
            return {
                "id": data.id,
                "title": data.title,
                "from_location": data.from_location,
                "to_location": data.to_location,
                "transport_type": data.transport_type,
                "departure_at": data.departure_at,
                "perks": data.perks or [],
                "image": data.image,
                "price": data.price,
                "quantity": data.quantity,
                "vendor": party(data.vendor_email, data.vendor_name),
                "status": data.status,
                "advertise": data.advertise,
                "created_at": data.created_at,
            }
        return data
