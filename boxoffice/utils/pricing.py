# boxoffice/utils/pricing.py
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from decouple import config

from boxoffice.models.event import Seat

logger = logging.getLogger(__name__)

PROCESSING_FEE_RATE = config("PROCESSING_FEE_RATE", default=0.02, cast=float)


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_total_price(
    seats: List[Seat],
    fee_rate: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Calculate the amount, processing fee and total for the selected seats.
    """
    if fee_rate is None:
        fee_rate = PROCESSING_FEE_RATE

    base_price = sum(seat.price for seat in seats)
    processing_fee = round_half_up(base_price * fee_rate)

    return {
        "amount": base_price,
        "processingFee": processing_fee,
        "totalAmount": base_price + processing_fee,
    }


def check_client_figures(pricing_details: Dict[str, Any], submitted: Dict[str, Optional[float]]) -> List[str]:
    """Compare client-submitted figures with the server's; return the mismatched fields."""
    mismatched = [
        field for field, value in submitted.items()
        if value is not None and abs(value - pricing_details[field]) > 0.005
    ]
    if mismatched:
        logger.warning(
            "Client pricing ignored for %s: submitted %s, computed %s",
            ", ".join(mismatched),
            {field: submitted[field] for field in mismatched},
            {field: pricing_details[field] for field in mismatched},
        )
    return mismatched
