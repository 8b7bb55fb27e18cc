"""
Token top-up: payment methods, requests, transaction status and history.
"""

import asyncio
import time
from typing import Callable, List, Optional

from kgiton.http_client import HttpClient, quote_segment
from kgiton.models import (
    BonusTier,
    PaymentMethod,
    PaymentMethodInfo,
    TopupRequest,
    TopupResponse,
    Transaction,
    TransactionStatusResponse,
)
from kgiton.modules.base import BaseModule
from kgiton.retry import SleepFunc

DEFAULT_WAIT_TIMEOUT = 300.0
DEFAULT_WAIT_INTERVAL = 5.0


class TopupModule(BaseModule):
    """Token top-up operations."""

    name = "topup"

    def __init__(self, http_client: HttpClient, *,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: SleepFunc = asyncio.sleep):
        super().__init__(http_client)
        self._clock = clock
        self._sleep = sleep

    async def get_payment_methods(self) -> List[PaymentMethodInfo]:
        response = await self.http_client.get("/api/topup/payment-methods")
        return self._unwrap(response, List[PaymentMethodInfo]) or []

    async def get_bonus_tiers(self) -> List[BonusTier]:
        response = await self.http_client.get("/api/topup/bonus-tiers")
        return self._unwrap(response, List[BonusTier]) or []

    async def request(self, license_key: str, token_count: int,
                      payment_method: Optional[PaymentMethod] = None,
                      customer_phone: Optional[str] = None) -> Optional[TopupResponse]:
        """Request a top-up and get payment instructions (URL or VA number)."""
        request = TopupRequest(
            license_key=license_key,
            token_count=token_count,
            payment_method=payment_method,
            customer_phone=customer_phone
        )
        response = await self.http_client.post("/api/topup/request", request.to_payload())
        return self._unwrap(response, TopupResponse)

    async def request_checkout(self, license_key: str, token_count: int) -> Optional[TopupResponse]:
        return await self.request(license_key, token_count, PaymentMethod.CHECKOUT_PAGE)

    async def request_va(self, license_key: str, token_count: int,
                         bank: PaymentMethod) -> Optional[TopupResponse]:
        return await self.request(license_key, token_count, bank)

    async def check_status(self, transaction_id: str) -> Optional[TransactionStatusResponse]:
        """Public status check, no authentication required."""
        response = await self.http_client.get(f"/api/topup/check/{quote_segment(transaction_id)}")
        return self._unwrap(response, TransactionStatusResponse)

    async def get_transaction_status(self, transaction_id: str) -> Optional[TransactionStatusResponse]:
        response = await self.http_client.get(f"/api/topup/status/{quote_segment(transaction_id)}")
        return self._unwrap(response, TransactionStatusResponse)

    async def get_history(self) -> List[Transaction]:
        response = await self.http_client.get("/api/topup/history")
        return self._unwrap(response, List[Transaction]) or []

    async def cancel(self, transaction_id: str) -> None:
        await self.http_client.post(f"/api/topup/cancel/{quote_segment(transaction_id)}")

    async def sync_status(self, transaction_id: str) -> Optional[TransactionStatusResponse]:
        """Ask the server to re-sync a transaction with the payment gateway."""
        response = await self.http_client.post(f"/api/topup/sync/{quote_segment(transaction_id)}")
        return self._unwrap(response, TransactionStatusResponse)

    async def calculate_amount(self, license_key: str, token_count: int) -> float:
        """Estimated price using the license's price per token."""
        response = await self.http_client.get(f"/api/license/validate/{quote_segment(license_key)}")
        data = response.data if isinstance(response.data, dict) else {}
        price_per_token = data.get("price_per_token") or 0
        return price_per_token * token_count

    async def wait_for_completion(self, transaction_id: str,
                                  timeout: float = DEFAULT_WAIT_TIMEOUT,
                                  interval: float = DEFAULT_WAIT_INTERVAL) -> Optional[TransactionStatusResponse]:
        """Poll :meth:`check_status` until the transaction leaves ``pending``.

        Once ``timeout`` seconds have elapsed the status is fetched one last
        time and returned as is, even if it is still pending. No timeout
        error is raised.
        """
        start = self._clock()

        while self._clock() - start < timeout:
            status = await self.check_status(transaction_id)
            if status is not None and not status.is_pending:
                return status
            await self._sleep(interval)

        self.logger.info(
            "Transaction still pending after wait timeout",
            transaction_id=transaction_id,
            timeout=timeout
        )
        return await self.check_status(transaction_id)
