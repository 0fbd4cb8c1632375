# boxoffice/models/booking.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import List, Literal, Optional
from datetime import datetime

BookingStatus = Literal["confirmed", "pending", "cancelled"]
# "monnify" is settled later through the gateway; the rest are taken at the box office
PaymentMethod = Literal["cash", "transfer", "pos", "monnify"]


class BookingBase(BaseModel):
    customerName: str
    customerEmail: EmailStr
    customerPhone: Optional[str] = None
    eventId: str
    seats: List[str] = Field(min_length=1)
    paymentMethod: PaymentMethod = "monnify"

    @field_validator("customerName")
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("customerName must not be blank")
        return v.strip()

    @field_validator("seats")
    def dedupe_seats(cls, v):
        # Keep request order, drop repeats
        return list(dict.fromkeys(v))


class BookingCreate(BookingBase):
    # Client-side figures are advisory; the server prices the seats itself.
    seatType: Optional[str] = None
    amount: Optional[float] = None
    processingFee: Optional[float] = None
    totalAmount: Optional[float] = None


class Booking(BookingBase):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    bookingCode: Optional[str] = None
    eventTitle: str
    eventType: str
    seatType: str
    amount: float
    processingFee: float
    totalAmount: float
    status: BookingStatus
    bookingDate: str
    bookingTime: str
    paymentReference: Optional[str] = None
    transactionReference: Optional[str] = None
    holdExpiresAt: Optional[datetime] = None
    cancelReason: Optional[str] = None
    createdAt: datetime
    updatedAt: Optional[datetime] = None


class BookingSummary(Booking):
    """Booking as listed for admins, with the hall it plays in."""

    eventHall: str = "N/A"
