# boxoffice/utils/monnify.py
"""Thin async client for the Monnify collections API."""

import base64
import hashlib
import hmac
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from decouple import config

from boxoffice.errors import PaymentConfigurationError, PaymentGatewayError

logger = logging.getLogger(__name__)

MONNIFY_API_KEY = config("MONNIFY_API_KEY", default="")
MONNIFY_SECRET_KEY = config("MONNIFY_SECRET_KEY", default="")
MONNIFY_CONTRACT_CODE = config("MONNIFY_CONTRACT_CODE", default="")
MONNIFY_BASE_URL = config("MONNIFY_BASE_URL", default="https://sandbox.monnify.com")
PUBLIC_BASE_URL = config("PUBLIC_BASE_URL", default="http://localhost:8000")

# Terminal statuses that release the booking's seats
FAILED_STATUSES = {"FAILED", "CANCELLED", "EXPIRED"}
WEBHOOK_EVENTS = {"TRANSACTION_STATUS_CHANGED", "SUCCESSFUL_TRANSACTION"}


class MonnifyClient:
    def __init__(
        self,
        api_key: str,
        secret_key: str,
        contract_code: str,
        base_url: str = MONNIFY_BASE_URL,
        redirect_base_url: str = PUBLIC_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 15.0,
    ) -> None:
        self.api_key = api_key
        self.secret_key = secret_key
        self.contract_code = contract_code
        self.base_url = base_url.rstrip("/")
        self.redirect_base_url = redirect_base_url.rstrip("/")
        self._transport = transport
        self._timeout = timeout

    def verify_signature(self, body: bytes, signature: Optional[str]) -> bool:
        """Check a webhook body against its HMAC-SHA512 signature (keyed by the client secret)."""
        if not signature:
            return False
        expected = hmac.new(self.secret_key.encode(), body, hashlib.sha512).hexdigest()
        return hmac.compare_digest(expected, signature.strip().lower())

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, transport=self._transport, timeout=self._timeout)

    async def _request(self, client: httpx.AsyncClient, method: str, url: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Monnify %s %s failed: %s", method, url, exc)
            raise PaymentGatewayError() from exc

        if response.status_code >= 400:
            logger.error("Monnify %s %s returned %s: %s", method, url, response.status_code, response.text)
            raise PaymentGatewayError(f"Payment service returned {response.status_code}")

        body = response.json()
        if not body.get("requestSuccessful"):
            logger.error("Monnify %s %s unsuccessful: %s", method, url, body.get("responseMessage"))
            raise PaymentGatewayError(body.get("responseMessage") or "Payment request failed")
        return body.get("responseBody") or {}

    async def _access_token(self, client: httpx.AsyncClient) -> str:
        credentials = base64.b64encode(f"{self.api_key}:{self.secret_key}".encode()).decode()
        body = await self._request(
            client, "POST", "/api/v1/auth/login",
            headers={"Authorization": f"Basic {credentials}"},
        )
        token = body.get("accessToken")
        if not token:
            raise PaymentGatewayError("Failed to authenticate with payment service")
        return token

    async def initialize_transaction(
        self,
        *,
        amount: float,
        customer_name: str,
        customer_email: str,
        payment_reference: str,
        description: str,
        customer_phone: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Start a checkout; returns checkoutUrl, paymentReference and transactionReference."""
        async with self._client() as client:
            token = await self._access_token(client)
            payload = {
                "amount": amount,
                "customerName": customer_name,
                "customerEmail": customer_email,
                "customerPhoneNumber": customer_phone,
                "paymentReference": payment_reference,
                "paymentDescription": description,
                "currencyCode": "NGN",
                "contractCode": self.contract_code,
                "redirectUrl": f"{self.redirect_base_url}/payment/callback?paymentReference={payment_reference}",
                "paymentMethods": ["CARD", "ACCOUNT_TRANSFER"],
            }
            body = await self._request(
                client, "POST", "/api/v1/merchant/transactions/init-transaction",
                json=payload, headers={"Authorization": f"Bearer {token}"},
            )
        logger.info("Monnify checkout started for %s", payment_reference)
        return {
            "checkoutUrl": body["checkoutUrl"],
            "paymentReference": body.get("paymentReference", payment_reference),
            "transactionReference": body.get("transactionReference"),
        }

    async def verify_transaction(self, payment_reference: str) -> Dict[str, Any]:
        async with self._client() as client:
            token = await self._access_token(client)
            body = await self._request(
                client, "GET", f"/api/v2/transactions/{quote(payment_reference, safe='')}",
                headers={"Authorization": f"Bearer {token}"},
            )
        return {
            "paymentStatus": body.get("paymentStatus", "UNKNOWN"),
            "transactionReference": body.get("transactionReference"),
            "amountPaid": float(body.get("amountPaid") or 0),
        }


def get_monnify_client() -> MonnifyClient:
    """FastAPI dependency building a client from configuration."""
    if not (MONNIFY_API_KEY and MONNIFY_SECRET_KEY and MONNIFY_CONTRACT_CODE):
        raise PaymentConfigurationError()
    return MonnifyClient(MONNIFY_API_KEY, MONNIFY_SECRET_KEY, MONNIFY_CONTRACT_CODE)


def get_monnify_keys() -> Dict[str, str]:
    """Public key and contract code for the browser SDK."""
    if not (MONNIFY_API_KEY and MONNIFY_CONTRACT_CODE):
        raise PaymentConfigurationError()
    return {"publicKey": MONNIFY_API_KEY, "contractCode": MONNIFY_CONTRACT_CODE}
