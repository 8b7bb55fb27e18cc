"""
KGiTON SDK for Python.

Asyncio client for the KGiTON API:

- client: ``KGiTON`` entry point and ``create_kgiton`` factory
- http_client: request gateway (auth headers, retries, error mapping)
- config: gateway configuration via pydantic-settings
- errors: typed error taxonomy
- retry: exponential backoff policy
- models: request and response models
- modules: auth, license, user, topup and payment façades
"""

from kgiton.client import KGiTON, create_kgiton
from kgiton.config import GatewayConfig
from kgiton.errors import (
    ApiError,
    AuthenticationError,
    AuthorizationError,
    ErrorKind,
    ErrorResponse,
    InsufficientTokenError,
    KGiTONError,
    LicenseOwnershipError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from kgiton.http_client import HttpClient
from kgiton.models import (
    ApiResponse,
    LicenseStatus,
    PartnerPaymentType,
    PaymentMethod,
    TransactionStatus,
)
from kgiton.modules import AuthModule, LicenseModule, PaymentModule, TopupModule, UserModule

__version__ = "1.0.0"

__all__ = [
    "KGiTON",
    "create_kgiton",
    "GatewayConfig",
    "HttpClient",
    "ApiResponse",
    "ErrorKind",
    "ErrorResponse",
    "KGiTONError",
    "NetworkError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "RateLimitError",
    "ApiError",
    "InsufficientTokenError",
    "LicenseOwnershipError",
    "LicenseStatus",
    "PartnerPaymentType",
    "PaymentMethod",
    "TransactionStatus",
    "AuthModule",
    "LicenseModule",
    "PaymentModule",
    "TopupModule",
    "UserModule",
]
