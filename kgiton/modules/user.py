"""
User profile, token usage and API key management.
"""

from typing import Any, Dict, List, Optional

from kgiton.http_client import quote_segment
from kgiton.models import (
    ApiKeyResponse,
    LicenseKey,
    LicenseStatus,
    LicenseTokenUsageResponse,
    TokenBalanceResponse,
    TokenUsageStats,
    UseTokenRequest,
    UseTokenResponse,
    UserProfile,
)
from kgiton.modules.base import BaseModule


class UserModule(BaseModule):
    """Operations on the authenticated user."""

    name = "user"

    async def get_profile(self) -> Optional[UserProfile]:
        response = await self.http_client.get("/api/user/profile")
        return self._unwrap(response, UserProfile)

    async def get_token_balance(self) -> Optional[TokenBalanceResponse]:
        """Token balance for every license key plus the total."""
        response = await self.http_client.get("/api/user/token-balance")
        return self._unwrap(response, TokenBalanceResponse)

    async def get_token_usage_stats(self) -> Optional[TokenUsageStats]:
        response = await self.http_client.get("/api/user/token-usage-stats")
        return self._unwrap(response, TokenUsageStats)

    async def get_license_token_usage(self, license_key: str, page: int = 1,
                                      limit: int = 20) -> Optional[LicenseTokenUsageResponse]:
        """Per-license usage with paginated history."""
        response = await self.http_client.get(
            f"/api/user/license/{quote_segment(license_key)}/usage",
            params={"page": page, "limit": limit}
        )
        return self._unwrap(response, LicenseTokenUsageResponse)

    async def use_token(self, license_key: str, purpose: Optional[str] = None,
                        metadata: Optional[Dict[str, Any]] = None) -> Optional[UseTokenResponse]:
        """Consume one token from ``license_key``.

        Args:
            license_key: License to deduct from.
            purpose: Optional free-text reason, stored with the usage record.
            metadata: Optional structured data stored with the usage record.

        Returns:
            Previous and new balance for the license.
        """
        request = UseTokenRequest(purpose=purpose, metadata=metadata)
        response = await self.http_client.post(
            f"/api/user/license-keys/{quote_segment(license_key)}/use-token",
            request.to_payload()
        )
        return self._unwrap(response, UseTokenResponse)

    async def assign_license(self, license_key: str) -> Optional[LicenseKey]:
        response = await self.http_client.post(
            "/api/user/assign-license",
            {"license_key": license_key}
        )
        return self._unwrap(response, LicenseKey)

    async def regenerate_api_key(self) -> Optional[ApiKeyResponse]:
        """Issue a new API key. The previous key stops working immediately."""
        response = await self.http_client.post("/api/user/regenerate-api-key")
        return self._unwrap(response, ApiKeyResponse)

    async def revoke_api_key(self) -> None:
        await self.http_client.post("/api/user/revoke-api-key")

    async def get_total_token_balance(self) -> int:
        balance = await self.get_token_balance()
        return balance.total_balance if balance else 0

    async def get_license_keys(self) -> List[LicenseKey]:
        profile = await self.get_profile()
        return profile.license_keys if profile else []

    async def has_active_license(self) -> bool:
        licenses = await self.get_license_keys()
        return any(lk.status == LicenseStatus.ACTIVE.value for lk in licenses)

    async def get_available_license_key(self, required_tokens: int = 1) -> Optional[str]:
        """First active license key holding at least ``required_tokens``."""
        for lk in await self.get_license_keys():
            if lk.status == LicenseStatus.ACTIVE.value and lk.token_balance >= required_tokens:
                return lk.key
        return None
