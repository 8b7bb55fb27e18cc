"""
Main entry point for the KGiTON SDK.
"""

import asyncio
import time
from typing import Any, Callable, Dict, Optional

import httpx

from kgiton.config import GatewayConfig
from kgiton.http_client import HttpClient
from kgiton.models import LicenseTokenBalanceSummary, LicenseValidation, TopupResponse, UseTokenResponse
from kgiton.modules import AuthModule, LicenseModule, PaymentModule, TopupModule, UserModule
from kgiton.retry import SleepFunc


class KGiTON:
    """Client for the KGiTON API.

    Usage:
        async with KGiTON(api_key="kgiton_xxx") as kgiton:
            result = await kgiton.use_token("LICENSE-KEY")
            print(result.new_balance)

    Attributes:
        auth: Login, register, forgot password.
        license: License validation, balances and ownership.
        user: Profile, token usage and API key management.
        topup: Token top-up, payment methods and transaction status.
        payment: Partner payment generation (QRIS, checkout page).
    """

    def __init__(self, config: Optional[GatewayConfig] = None, *,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 sleep: SleepFunc = asyncio.sleep,
                 clock: Callable[[], float] = time.monotonic,
                 **overrides: Any):
        self.http_client = HttpClient(config, transport=transport, sleep=sleep, **overrides)

        self.auth = AuthModule(self.http_client)
        self.license = LicenseModule(self.http_client)
        self.user = UserModule(self.http_client)
        self.topup = TopupModule(self.http_client, clock=clock, sleep=sleep)
        self.payment = PaymentModule(self.http_client)

    async def __aenter__(self) -> "KGiTON":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.http_client.close()

    @property
    def config(self) -> GatewayConfig:
        return self.http_client.config

    def update_config(self, **changes: Any) -> None:
        """Shallow-merge configuration fields; ``None`` values are ignored."""
        self.http_client.update_config(**changes)

    def set_api_key(self, api_key: str) -> None:
        self.http_client.set_api_key(api_key)

    def set_access_token(self, access_token: str) -> None:
        self.http_client.set_access_token(access_token)

    def clear_auth(self) -> None:
        self.http_client.clear_auth()

    # Convenience shortcuts

    async def validate_license(self, license_key: str) -> Optional[LicenseValidation]:
        return await self.license.validate(license_key)

    async def use_token(self, license_key: str, purpose: Optional[str] = None,
                        metadata: Optional[Dict[str, Any]] = None) -> Optional[UseTokenResponse]:
        return await self.user.use_token(license_key, purpose=purpose, metadata=metadata)

    async def get_token_balance(self, license_key: str) -> LicenseTokenBalanceSummary:
        return await self.license.get_token_balance(license_key)

    async def request_topup(self, license_key: str, token_count: int) -> Optional[TopupResponse]:
        """Request a checkout-page top-up."""
        return await self.topup.request_checkout(license_key, token_count)


def create_kgiton(config: Optional[GatewayConfig] = None, **kwargs: Any) -> KGiTON:
    """Factory for :class:`KGiTON`."""
    return KGiTON(config, **kwargs)
