# boxoffice/models/event.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, List, Literal, Optional
from datetime import date, time

EventType = Literal["movie", "match"]
EventStatus = Literal["active", "draft", "cancelled"]


class PricingTier(BaseModel):
    price: float = Field(ge=0)
    count: int = Field(ge=0)


class EventBase(BaseModel):
    title: str
    event_type: EventType
    category: str
    event_date: date
    event_time: time
    hall_id: str
    status: EventStatus = "draft"
    description: Optional[str] = None
    duration: Optional[str] = None
    image_url: Optional[str] = None
    # Keyed by pricing key, e.g. {"vipSingle": {"price": 7500, "count": 20}}
    pricing: Dict[str, PricingTier]

    @field_validator("title", "category", "hall_id")
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_validator("pricing")
    def validate_pricing(cls, v):
        if not v:
            raise ValueError("Pricing information is required.")
        return v


class EventCreate(EventBase):
    # Derived from the seat layout when omitted
    total_seats: Optional[int] = Field(default=None, gt=0)


class EventUpdate(EventCreate):
    pass


class Event(EventBase):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    total_seats: int
    bookedSeats: List[str] = []


class Seat(BaseModel):
    id: str
    category: str   # "sofa", "regular", "vipSingle", "standardMatch", ...
    price: float
    isBooked: bool = False
    row: Optional[str] = None
    number: Optional[int] = None


class SeatMap(BaseModel):
    event_id: str
    hall_id: str
    hall_type: Literal["vip", "standard"]
    singleSelection: bool
    seats: List[Seat]


class BookedSeatsUpdate(BaseModel):
    newBookedSeats: List[str]


class QuoteRequest(BaseModel):
    seats: List[str] = Field(min_length=1)


class Quote(BaseModel):
    seats: List[str]
    category: str
    seatType: str
    amount: float
    processingFee: float
    totalAmount: float
