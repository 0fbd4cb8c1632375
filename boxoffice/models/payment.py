# boxoffice/models/payment.py
from pydantic import BaseModel
from typing import Any, Dict, Optional


class PaymentInitRequest(BaseModel):
    bookingId: str


class PaymentInitResponse(BaseModel):
    success: bool = True
    checkoutUrl: str
    paymentReference: str
    transactionReference: Optional[str] = None


class PaymentVerifyRequest(BaseModel):
    paymentReference: str


class PaymentVerification(BaseModel):
    success: bool = True
    paymentReference: str
    paymentStatus: str
    transactionReference: Optional[str] = None
    amountPaid: float = 0
    verified: bool
    bookingStatus: str


class MonnifyKeys(BaseModel):
    publicKey: str
    contractCode: str


class MonnifyWebhook(BaseModel):
    eventType: str
    eventData: Dict[str, Any] = {}


class WebhookAck(BaseModel):
    message: str
    verified: Optional[bool] = None
    bookingStatus: Optional[str] = None
