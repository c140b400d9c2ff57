"""
Paystack client

Wraps transaction verification and webhook signature checks. Amounts on
the Paystack side are in kobo (1 NGN = 100 kobo).
"""

import hashlib
import hmac
import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import ExternalServiceException

logger = logging.getLogger(__name__)

PAYSTACK_TIMEOUT_SECONDS = 15.0


def to_kobo(amount_ngn: int) -> int:
    return int(amount_ngn) * 100


class PaystackClient:
    def __init__(self, secret_key: Optional[str] = None, base_url: Optional[str] = None):
        self.secret_key = secret_key if secret_key is not None else settings.PAYSTACK_SECRET_KEY
        self.base_url = (base_url or settings.PAYSTACK_BASE_URL).rstrip("/")

    async def verify_transaction(self, reference: str) -> Dict[str, Any]:
        """
        Look up a transaction by reference

        Returns:
            The provider's JSON body, ``{"status": bool, "data": {...}}``

        Raises:
            ExternalServiceException: Paystack unreachable or returned
                something other than JSON
        """
        url = f"{self.base_url}/transaction/verify/{reference}"
        try:
            async with httpx.AsyncClient(timeout=PAYSTACK_TIMEOUT_SECONDS) as client:
                response = await client.get(
                    url, headers={"Authorization": f"Bearer {self.secret_key}"}
                )
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Paystack verification request failed for {reference}: {e}")
            raise ExternalServiceException("Paystack", "Could not verify transaction")

    def sign(self, raw_body: bytes) -> str:
        return hmac.new(self.secret_key.encode(), raw_body, hashlib.sha512).hexdigest()

    def verify_signature(self, raw_body: bytes, signature: Optional[str]) -> bool:
        """HMAC-SHA512 of the raw request body, compared in constant time"""
        if not signature or not self.secret_key:
            return False
        return hmac.compare_digest(self.sign(raw_body), signature)


paystack_client = PaystackClient()
