"""
Partner payment integration (QRIS and checkout page).

Partners use these endpoints to charge their own customers through the
KGiTON payment gateway. They require API key authentication, and each
generated payment deducts one token from the given license.
"""

from typing import Any, Dict, Mapping, Optional, Union

from kgiton.http_client import quote_segment
from kgiton.models import (
    GeneratePaymentRequest,
    GeneratePaymentResponse,
    GenerateQRISRequest,
    GenerateQRISResponse,
    PartnerPaymentType,
    PaymentStatusResponse,
    PaymentWebhookPayload,
)
from kgiton.modules.base import BaseModule


class PaymentModule(BaseModule):
    """Partner payment generation and status."""

    name = "payment"

    async def generate(self, request: Union[GeneratePaymentRequest, Dict[str, Any]]) -> Optional[GeneratePaymentResponse]:
        """Generate a QRIS or checkout-page payment through the unified endpoint."""
        if not isinstance(request, GeneratePaymentRequest):
            request = GeneratePaymentRequest.model_validate(request)
        response = await self.http_client.post("/api/partner/payment/generate", request.to_payload())
        return self._unwrap(response, GeneratePaymentResponse)

    async def generate_qris_payment(self, license_key: str, transaction_id: str, amount: float,
                                    **options: Any) -> Optional[GeneratePaymentResponse]:
        return await self.generate(GeneratePaymentRequest(
            license_key=license_key,
            transaction_id=transaction_id,
            amount=amount,
            payment_type=PartnerPaymentType.QRIS,
            **options
        ))

    async def generate_checkout_page(self, license_key: str, transaction_id: str, amount: float,
                                     **options: Any) -> Optional[GeneratePaymentResponse]:
        return await self.generate(GeneratePaymentRequest(
            license_key=license_key,
            transaction_id=transaction_id,
            amount=amount,
            payment_type=PartnerPaymentType.CHECKOUT_PAGE,
            **options
        ))

    async def generate_qris(self, request: Union[GenerateQRISRequest, Dict[str, Any]]) -> Optional[GenerateQRISResponse]:
        """Legacy QRIS-only endpoint, kept for older integrations."""
        if not isinstance(request, GenerateQRISRequest):
            request = GenerateQRISRequest.model_validate(request)
        response = await self.http_client.post("/api/partner/payment/qris", request.to_payload())
        return self._unwrap(response, GenerateQRISResponse)

    async def quick_qris(self, amount: float, transaction_id: str,
                         description: Optional[str] = None) -> Optional[GenerateQRISResponse]:
        return await self.generate_qris(GenerateQRISRequest(
            amount=amount,
            transaction_id=transaction_id,
            description=description
        ))

    async def check_status(self, transaction_id: str) -> Optional[PaymentStatusResponse]:
        response = await self.http_client.get(
            f"/api/partner/payment/status/{quote_segment(transaction_id)}"
        )
        return self._unwrap(response, PaymentStatusResponse)

    @staticmethod
    def parse_webhook(payload: Mapping[str, Any]) -> PaymentWebhookPayload:
        """Validate a webhook body received by the partner's own server.

        Raises:
            pydantic.ValidationError: The payload does not match the contract.
        """
        return PaymentWebhookPayload.model_validate(dict(payload))
