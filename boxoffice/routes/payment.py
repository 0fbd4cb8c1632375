# boxoffice/routes/payment.py
import logging
from typing import Tuple

from fastapi import APIRouter, HTTPException, Depends, Request
from pydantic import ValidationError

from boxoffice.database import BOOKINGS, get_database
from boxoffice.errors import BookingNotFoundError
from boxoffice.models.payment import (
    MonnifyKeys,
    MonnifyWebhook,
    PaymentInitRequest,
    PaymentInitResponse,
    PaymentVerification,
    PaymentVerifyRequest,
    WebhookAck,
)
from boxoffice.utils.documents import parse_object_id
from boxoffice.utils.monnify import FAILED_STATUSES, WEBHOOK_EVENTS, get_monnify_client, get_monnify_keys
from boxoffice.utils.reservations import cancel_booking, confirm_booking, new_payment_reference

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/monnify-keys", response_model=MonnifyKeys)
async def monnify_keys():
    return get_monnify_keys()


@router.post("/initialize", response_model=PaymentInitResponse)
async def initialize_payment(
    request: PaymentInitRequest,
    db=Depends(get_database),
    monnify=Depends(get_monnify_client),
):
    booking_id = parse_object_id(request.bookingId, "Booking ID")
    booking = await db[BOOKINGS].find_one({"_id": booking_id})
    if not booking:
        raise BookingNotFoundError(request.bookingId)
    if booking["status"] != "pending":
        raise HTTPException(status_code=409, detail="Booking is not awaiting payment")

    payment_reference = booking.get("paymentReference") or new_payment_reference()
    # Amount comes from the stored booking, never from the client
    result = await monnify.initialize_transaction(
        amount=booking["totalAmount"],
        customer_name=booking["customerName"],
        customer_email=booking["customerEmail"],
        customer_phone=booking.get("customerPhone"),
        payment_reference=payment_reference,
        description=f"Booking {booking.get('bookingCode', booking_id)} - Seats: {', '.join(booking['seats'])}",
    )
    await db[BOOKINGS].update_one(
        {"_id": booking_id},
        {"$set": {
            "paymentReference": payment_reference,
            "transactionReference": result.get("transactionReference"),
        }},
    )
    return PaymentInitResponse(**result)


async def _settle(db, booking, result) -> Tuple[bool, str]:
    """Apply a gateway status to a booking; return (verified, booking status)."""
    reference = booking.get("paymentReference")
    payment_status = result["paymentStatus"]
    verified = payment_status == "PAID" and result["amountPaid"] >= booking["totalAmount"]
    booking_status = booking["status"]

    if booking_status == "pending":
        if verified:
            confirmed = await confirm_booking(
                db, booking["_id"], {"transactionReference": result.get("transactionReference")},
            )
            if confirmed is None:
                current = await db[BOOKINGS].find_one({"_id": booking["_id"]}, {"status": 1})
                booking_status = current["status"]
            else:
                booking_status = confirmed["status"]
        elif payment_status in FAILED_STATUSES:
            cancelled = await cancel_booking(db, str(booking["_id"]))
            booking_status = cancelled["status"]
            logger.info("Payment %s ended %s; booking released", reference, payment_status)
        elif payment_status == "PAID":
            logger.warning(
                "Payment %s underpaid: %s of %s", reference, result["amountPaid"], booking["totalAmount"],
            )

    if booking_status == "cancelled" and payment_status == "PAID":
        logger.warning(
            "Payment %s of %s received for cancelled booking %s; refund required",
            reference, result["amountPaid"], booking.get("bookingCode", booking["_id"]),
        )
    return verified, booking_status


@router.post("/verify", response_model=PaymentVerification)
async def verify_payment(
    request: PaymentVerifyRequest,
    db=Depends(get_database),
    monnify=Depends(get_monnify_client),
):
    reference = request.paymentReference.strip()
    if not reference:
        raise HTTPException(status_code=400, detail="Payment reference is required")

    booking = await db[BOOKINGS].find_one({"paymentReference": reference})
    if not booking:
        raise BookingNotFoundError(reference)

    result = await monnify.verify_transaction(reference)
    verified, booking_status = await _settle(db, booking, result)

    return PaymentVerification(
        paymentReference=reference,
        paymentStatus=result["paymentStatus"],
        transactionReference=result.get("transactionReference"),
        amountPaid=result["amountPaid"],
        verified=verified,
        bookingStatus=booking_status,
    )


@router.post("/webhook", response_model=WebhookAck)
async def monnify_webhook(request: Request, db=Depends(get_database), monnify=Depends(get_monnify_client)):
    """Settle a booking when Monnify reports a transaction status change."""
    body = await request.body()
    if not monnify.verify_signature(body, request.headers.get("monnify-signature")):
        logger.warning("Monnify webhook rejected: bad signature")
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        payload = MonnifyWebhook.model_validate_json(body)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Malformed webhook payload")
    if payload.eventType not in WEBHOOK_EVENTS:
        return WebhookAck(message="Event type not supported")

    payment_reference = payload.eventData.get("paymentReference")
    transaction_reference = payload.eventData.get("transactionReference")
    if payment_reference:
        booking = await db[BOOKINGS].find_one({"paymentReference": payment_reference})
    elif transaction_reference:
        booking = await db[BOOKINGS].find_one({"transactionReference": transaction_reference})
    else:
        raise HTTPException(status_code=400, detail="Webhook carries no payment reference")
    if not booking:
        raise BookingNotFoundError(payment_reference or transaction_reference)

    # The payload status is not trusted; ask Monnify directly
    result = await monnify.verify_transaction(booking["paymentReference"])
    verified, booking_status = await _settle(db, booking, result)
    logger.info("Monnify webhook %s for %s -> %s", payload.eventType, booking["paymentReference"], booking_status)
    return WebhookAck(message="Webhook processed", verified=verified, bookingStatus=booking_status)
