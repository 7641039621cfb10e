"""
DiagnoCenter HR - Payment Gateway

Charges salary disbursements through an external card processor.
Primary provider: Stripe (https://stripe.com/docs/api/charges).

The gateway is injected into the salary service so tests and other
deployments can swap the provider.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


class ChargeStatus(str, Enum):
    """Charge outcome as reported by the provider."""
    SUCCEEDED = "succeeded"
    PENDING = "pending"
    FAILED = "failed"


@dataclass
class ChargeResult:
    """Result of a charge attempt."""
    status: ChargeStatus
    charge_id: Optional[str] = None
    message: str = ""
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == ChargeStatus.SUCCEEDED


class PaymentGateway(ABC):
    """Abstract base class for payment gateways."""

    @abstractmethod
    async def charge(
        self,
        amount_cents: int,
        currency: str,
        description: str,
        payment_token: str,
    ) -> ChargeResult:
        """Charge ``amount_cents`` (minor units) against ``payment_token``."""
        pass


class StripeGateway(PaymentGateway):
    """
    Stripe charges via httpx.

    Without a secret key the gateway runs in stub mode and reports every
    charge as succeeded, which keeps local development usable.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.secret_key = secret_key if secret_key is not None else settings.stripe_secret_key
        self.base_url = (base_url or settings.stripe_base_url).rstrip("/")
        self.timeout = timeout or settings.stripe_timeout_seconds

        if not self.secret_key:
            logger.warning("StripeGateway initialized without secret key - using stub mode")
            self._is_stub = True
        else:
            self._is_stub = False
            logger.info(f"StripeGateway initialized (live={self.secret_key.startswith('sk_live_')})")

    @property
    def is_stub(self) -> bool:
        return self._is_stub

    async def _post(self, endpoint: str, data: Dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(
                f"{self.base_url}{endpoint}",
                data=data,
                auth=(self.secret_key, ""),
            )

    async def charge(
        self,
        amount_cents: int,
        currency: str,
        description: str,
        payment_token: str,
    ) -> ChargeResult:
        """
        Create a charge.

        API: POST https://api.stripe.com/v1/charges

        Network errors and non-2xx responses come back as a FAILED result;
        this method does not raise for provider-side problems.
        """
        if self._is_stub:
            logger.warning("StripeGateway in STUB mode - returning fake charge")
            return ChargeResult(
                status=ChargeStatus.SUCCEEDED,
                charge_id=f"ch_stub_{amount_cents}",
                message="Charge succeeded (STUB MODE)",
            )

        payload = {
            "amount": amount_cents,
            "currency": currency,
            "description": description,
            "source": payment_token,
        }

        logger.info(f"Creating Stripe charge: amount={amount_cents} {currency}")

        try:
            response = await self._post("/v1/charges", payload)
        except httpx.TimeoutException:
            logger.error("Stripe API timeout: POST /v1/charges")
            return ChargeResult(status=ChargeStatus.FAILED, message="Request timed out. Please try again.")
        except httpx.RequestError as e:
            logger.error(f"Stripe API request error: {e}")
            return ChargeResult(status=ChargeStatus.FAILED, message=f"Network error: {str(e)}")

        try:
            body = response.json()
        except ValueError:
            body = {}

        logger.debug(f"Stripe POST /v1/charges: status={response.status_code}")

        if response.status_code >= 400:
            message = (body.get("error") or {}).get("message") or f"HTTP {response.status_code}"
            logger.error(f"Stripe API error: {message}")
            return ChargeResult(status=ChargeStatus.FAILED, message=message, raw=body)

        status_map = {
            "succeeded": ChargeStatus.SUCCEEDED,
            "pending": ChargeStatus.PENDING,
            "failed": ChargeStatus.FAILED,
        }
        charge_status = status_map.get(str(body.get("status", "")).lower(), ChargeStatus.FAILED)

        outcome = body.get("outcome") or {}

        logger.info(f"Stripe charge result: id={body.get('id')}, status={charge_status.value}")

        return ChargeResult(
            status=charge_status,
            charge_id=body.get("id"),
            message=outcome.get("seller_message", ""),
            raw=body,
        )


def get_payment_gateway() -> PaymentGateway:
    """Default gateway factory."""
    return StripeGateway()
