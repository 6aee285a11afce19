"""Payment submission collaborators.

A payment service receives one ``PaymentAttempt`` per submission and resolves
it exactly once with ``PaymentSuccess`` or ``PaymentFailure``. How the fee is
split among the attempt's payees is up to the service.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from .config import Config
from .models import PaymentAttempt, PaymentFailure, PaymentOutcome, PaymentSuccess

logger = logging.getLogger(__name__)


class PaymentService(ABC):
    """Abstract payment backend."""

    @abstractmethod
    async def submit(self, attempt: PaymentAttempt) -> PaymentOutcome:
        """Submit ``attempt`` and report the outcome."""
        pass


class SimulatedPaymentService(PaymentService):
    """Stand-in processor: waits, then succeeds (or fails with a fixed reason)."""

    def __init__(self, delay: Optional[float] = None, fail_with: Optional[str] = None):
        self.delay = Config.SIMULATED_PAYMENT_DELAY if delay is None else delay
        self.fail_with = fail_with
        self.submitted: List[PaymentAttempt] = []

    async def submit(self, attempt: PaymentAttempt) -> PaymentOutcome:
        self.submitted.append(attempt)
        logger.info(
            f"Simulating payment {attempt.attempt_id}: total={attempt.total} "
            f"payees={len(attempt.payees)}"
        )
        await asyncio.sleep(self.delay)
        if self.fail_with:
            return PaymentFailure(self.fail_with)
        return PaymentSuccess(receipt_id=f"sim-{attempt.attempt_id[:12]}")


class HttpPaymentService(PaymentService):
    """Payment backend reached over HTTP.

    POSTs ``attempt.to_dict()`` as JSON. A 2xx response carrying a
    ``receipt_id`` is a success; anything else is a failure with a reason.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None
    ):
        self.url = url or Config.PAYMENT_API_URL
        if not self.url:
            raise ValueError("Payment API URL is not configured (set PAYMENT_API_URL)")
        self.timeout = Config.PAYMENT_TIMEOUT_SECONDS if timeout is None else timeout
        self.headers = headers or {}

    async def _post_json(self, payload: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        client_timeout = aiohttp.ClientTimeout(total=self.timeout or None)
        async with aiohttp.ClientSession(timeout=client_timeout) as session:
            async with session.post(self.url, json=payload, headers=self.headers) as response:
                try:
                    data = await response.json(content_type=None)
                except ValueError:
                    data = None
                return response.status, data if isinstance(data, dict) else {}

    async def submit(self, attempt: PaymentAttempt) -> PaymentOutcome:
        try:
            status, data = await self._post_json(attempt.to_dict())
        except (asyncio.TimeoutError, TimeoutError):
            logger.warning(f"Payment {attempt.attempt_id} timed out")
            return PaymentFailure("timeout")
        except aiohttp.ClientError as e:
            logger.warning(f"Payment {attempt.attempt_id} network error: {e}")
            return PaymentFailure(f"network error: {e}")

        if not 200 <= status < 300:
            reason = data.get("reason") or data.get("error")
            return PaymentFailure(f"rejected: {reason}" if reason else f"rejected: {status}")

        receipt_id = data.get("receipt_id") or data.get("receiptId")
        if not receipt_id:
            return PaymentFailure("rejected: missing receipt id")
        return PaymentSuccess(receipt_id=str(receipt_id))
