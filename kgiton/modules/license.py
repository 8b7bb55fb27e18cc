"""
License key validation and lookup.
"""

from typing import Optional

from kgiton.errors import KGiTONError, LicenseOwnershipError
from kgiton.http_client import quote_segment
from kgiton.models import (
    LicenseKey,
    LicenseOwnershipValidation,
    LicenseStatus,
    LicenseTokenBalanceSummary,
    LicenseValidation,
    TrialInfo,
)
from kgiton.modules.base import BaseModule


class LicenseModule(BaseModule):
    """License key validation, balances and ownership checks."""

    name = "license"

    async def validate(self, license_key: str) -> Optional[LicenseValidation]:
        response = await self.http_client.get(f"/api/license/validate/{quote_segment(license_key)}")
        return self._unwrap(response, LicenseValidation)

    async def get_by_key(self, license_key: str) -> Optional[LicenseKey]:
        response = await self.http_client.get(f"/api/license/key/{quote_segment(license_key)}")
        return self._unwrap(response, LicenseKey)

    async def get_by_id(self, license_id: str) -> Optional[LicenseKey]:
        response = await self.http_client.get(f"/api/admin/license-keys/{quote_segment(license_id)}")
        return self._unwrap(response, LicenseKey)

    async def has_sufficient_tokens(self, license_key: str, required_tokens: int = 1) -> bool:
        """True when the license is valid and holds at least ``required_tokens``.

        Any SDK error is reported as ``False``.
        """
        try:
            validation = await self.validate(license_key)
        except KGiTONError as e:
            self.logger.debug("Token sufficiency check failed", error=str(e))
            return False
        if validation is None:
            return False
        return validation.is_valid and validation.token_balance >= required_tokens

    async def is_active(self, license_key: str) -> bool:
        """True when the license is valid and active. Any SDK error is ``False``."""
        try:
            validation = await self.validate(license_key)
        except KGiTONError as e:
            self.logger.debug("License activity check failed", error=str(e))
            return False
        if validation is None:
            return False
        return validation.is_valid and validation.status == LicenseStatus.ACTIVE.value

    async def validate_ownership(self, license_key: str,
                                 raise_on_not_owner: bool = False) -> Optional[LicenseOwnershipValidation]:
        """Check whether the license belongs to the authenticated user.

        Makes a single call to the ownership endpoint. By default a negative
        result (missing, unassigned, owned by someone else) is returned as
        data. With ``raise_on_not_owner`` set those outcomes raise
        :class:`LicenseOwnershipError` instead.
        """
        response = await self.http_client.get(
            f"/api/license/validate-ownership/{quote_segment(license_key)}"
        )
        result = self._unwrap(response, LicenseOwnershipValidation)

        if not raise_on_not_owner or result is None:
            return result

        if not result.exists:
            raise LicenseOwnershipError("License key not found", details=result.model_dump())
        if not result.is_assigned:
            raise LicenseOwnershipError(
                "License key is not assigned to any user",
                details=result.model_dump()
            )
        if not result.is_owner:
            raise LicenseOwnershipError(
                "License key is not assigned to you. It belongs to another user. "
                f"(Your ID: {result.owner_user_id}, Assigned to: {result.assigned_to_user_id})",
                details=result.model_dump()
            )
        return result

    async def get_trial_info(self, license_key: str) -> TrialInfo:
        try:
            validation = await self.validate(license_key)
        except KGiTONError as e:
            self.logger.debug("Trial lookup failed", error=str(e))
            return TrialInfo(is_trial=False)
        if validation is None:
            return TrialInfo(is_trial=False)
        return TrialInfo(
            is_trial=validation.status == LicenseStatus.TRIAL.value,
            expires_at=validation.trial_expires_at
        )

    async def get_token_balance(self, license_key: str) -> LicenseTokenBalanceSummary:
        validation = await self.validate(license_key)
        if validation is None:
            return LicenseTokenBalanceSummary()
        return LicenseTokenBalanceSummary(
            balance=validation.token_balance,
            price_per_token=validation.price_per_token
        )
