"""
Data models for the KGiTON API.

Response models accept unknown fields so newer server payloads pass through
untouched; request models drop unset fields when serialized.
"""

from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

T = TypeVar("T")


class KGiTONModel(BaseModel):
    """Base model for API payloads."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for a request body, omitting unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


class ApiResponse(KGiTONModel, Generic[T]):
    """Envelope returned by every endpoint."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    error: Optional[str] = None

    _status_code: int = PrivateAttr(default=200)

    @property
    def status_code(self) -> int:
        """HTTP status of the response that produced this envelope."""
        return self._status_code


# ============================================================================
# Enums
# ============================================================================

class UserRole(str, Enum):
    """User roles."""
    SUPER_ADMIN = "super_admin"
    USER = "user"


class LicenseStatus(str, Enum):
    """License key status."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    TRIAL = "trial"


class LicensePurchaseType(str, Enum):
    BUY = "buy"
    RENT = "rent"


class LicenseTransactionStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class TransactionStatus(str, Enum):
    """Top-up transaction status."""
    SUCCESS = "success"
    FAILED = "failed"
    PENDING = "pending"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    """Top-up payment methods."""
    CHECKOUT_PAGE = "checkout_page"
    VA_BRI = "va_bri"
    VA_BNI = "va_bni"
    VA_BCA = "va_bca"
    VA_MANDIRI = "va_mandiri"
    VA_PERMATA = "va_permata"
    VA_BSI = "va_bsi"
    VA_CIMB = "va_cimb"
    VA_SINARMAS = "va_sinarmas"
    VA_MUAMALAT = "va_muamalat"
    VA_INDOMARET = "va_indomaret"
    VA_ALFAMART = "va_alfamart"
    QRIS = "qris"


class PartnerPaymentType(str, Enum):
    QRIS = "qris"
    CHECKOUT_PAGE = "checkout_page"


class PartnerPaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    EXPIRED = "expired"
    FAILED = "failed"


class WebhookPaymentStatus(str, Enum):
    PAID = "paid"
    EXPIRED = "expired"
    FAILED = "failed"


# ============================================================================
# Users and licenses
# ============================================================================

class User(KGiTONModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    api_key: Optional[str] = None
    phone_number: Optional[str] = None
    referral_code: Optional[str] = None
    referred_by: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class LicenseKey(KGiTONModel):
    """License key with device and purchase info."""
    id: Optional[str] = None
    key: str
    price_per_token: float = 0
    token_balance: int = 0
    status: Optional[str] = None
    assigned_to: Optional[str] = None
    referred_by_user_id: Optional[str] = None
    trial_expires_at: Optional[str] = None
    device_name: Optional[str] = None
    device_serial_number: Optional[str] = None
    device_model: Optional[str] = None
    device_notes: Optional[str] = None
    purchase_type: Optional[str] = None
    purchase_price: Optional[float] = None
    rental_price_monthly: Optional[float] = None
    subscription_status: Optional[str] = None
    subscription_next_due_date: Optional[str] = None
    subscription_expires_at: Optional[str] = None
    purchase_payment_status: Optional[str] = None
    purchase_paid_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class UserProfile(User):
    license_keys: List[LicenseKey] = Field(default_factory=list)


class LicenseValidation(KGiTONModel):
    """Result of ``GET /api/license/validate/{key}``."""
    license_key: str
    exists: bool = False
    is_valid: bool = False
    is_assigned: bool = False
    assigned_to_user_id: Optional[str] = None
    status: Optional[str] = None
    token_balance: int = 0
    price_per_token: float = 0
    device_name: Optional[str] = None
    device_model: Optional[str] = None
    purchase_type: Optional[str] = None
    subscription_status: Optional[str] = None
    subscription_valid: Optional[bool] = None
    subscription_due_date: Optional[str] = None
    valid: Optional[bool] = None
    trial_expires_at: Optional[str] = None
    message: Optional[str] = None


class LicenseOwnershipValidation(KGiTONModel):
    """Result of ``GET /api/license/validate-ownership/{key}``."""
    license_key: str
    exists: bool = False
    is_assigned: bool = False
    is_owner: bool = False
    owner_user_id: Optional[str] = None
    assigned_to_user_id: Optional[str] = None
    status: Optional[str] = None
    token_balance: int = 0
    is_valid: bool = False


class TrialInfo(KGiTONModel):
    is_trial: bool = False
    expires_at: Optional[str] = None


class LicenseTokenBalanceSummary(KGiTONModel):
    balance: int = 0
    price_per_token: float = 0


class LicenseTokenBalance(KGiTONModel):
    id: Optional[str] = None
    license_key: str
    token_balance: int = 0
    price_per_token: float = 0
    status: Optional[str] = None


class TokenBalanceResponse(KGiTONModel):
    license_keys: List[LicenseTokenBalance] = Field(default_factory=list)
    total_balance: int = 0


# ============================================================================
# Token usage
# ============================================================================

class UseTokenRequest(KGiTONModel):
    purpose: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class UseTokenResponse(KGiTONModel):
    license_key: str
    previous_balance: int = 0
    new_balance: int = 0
    tokens_used: int = 0


class TokenUsage(KGiTONModel):
    id: Optional[str] = None
    license_key: Optional[str] = None
    user_id: Optional[str] = None
    previous_balance: int = 0
    new_balance: int = 0
    tokens_used: Optional[int] = None
    purpose: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None


class TokenUsageStats(KGiTONModel):
    """Weekly usage, average daily usage and estimated days remaining."""
    weekly_usage: List[Dict[str, Any]] = Field(default_factory=list)
    avg_daily_usage: float = 0
    est_days_remaining: Optional[float] = None
    total_balance: Optional[int] = None


class LicenseTokenUsageResponse(KGiTONModel):
    license_key: Optional[str] = None
    weekly_usage: List[Dict[str, Any]] = Field(default_factory=list)
    usage_history: List[TokenUsage] = Field(default_factory=list)
    pagination: Optional[Dict[str, Any]] = None


# ============================================================================
# Top-up
# ============================================================================

class TopupRequest(KGiTONModel):
    license_key: str
    token_count: int
    payment_method: Optional[PaymentMethod] = None
    customer_phone: Optional[str] = None


class VirtualAccountInfo(KGiTONModel):
    number: str
    name: Optional[str] = None
    bank: Optional[str] = None


class TopupResponse(KGiTONModel):
    transaction_id: str
    license_key: Optional[str] = None
    tokens_requested: int = 0
    amount_to_pay: float = 0
    price_per_token: float = 0
    status: Optional[str] = None
    payment_method: Optional[str] = None
    gateway_provider: Optional[str] = None
    payment_url: Optional[str] = None
    virtual_account: Optional[VirtualAccountInfo] = None
    expires_at: Optional[str] = None


class PaymentMethodInfo(KGiTONModel):
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    enabled: bool = True


class BonusTier(KGiTONModel):
    min_tokens: int = 0
    bonus_percent: float = 0
    description: Optional[str] = None


class Transaction(KGiTONModel):
    id: str
    user_id: Optional[str] = None
    license_key: Optional[str] = None
    amount: float = 0
    tokens_added: int = 0
    status: Optional[str] = None
    payment_reference: Optional[str] = None
    payment_method: Optional[str] = None
    gateway_provider: Optional[str] = None
    gateway_transaction_id: Optional[str] = None
    gateway_va_number: Optional[str] = None
    gateway_channel: Optional[str] = None
    gateway_payment_url: Optional[str] = None
    expires_at: Optional[str] = None
    created_at: Optional[str] = None


class TransactionStatusResponse(KGiTONModel):
    transaction_id: str
    amount: float = 0
    tokens_added: int = 0
    status: str
    payment_method: Optional[str] = None
    created_at: Optional[str] = None
    paid_at: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == TransactionStatus.PENDING.value


# ============================================================================
# Auth
# ============================================================================

class LoginRequest(KGiTONModel):
    email: str
    password: str


class LoginResponse(KGiTONModel):
    access_token: Optional[str] = None
    user: Optional[User] = None


class RegisterRequest(KGiTONModel):
    name: str
    email: str
    password: str
    phone_number: Optional[str] = None
    referral_code: Optional[str] = None


class RegisterResponse(KGiTONModel):
    message: Optional[str] = None
    user: Optional[User] = None


class ApiKeyResponse(KGiTONModel):
    api_key: str
    created_at: Optional[str] = None


# ============================================================================
# Partner payment
# ============================================================================

class PaymentItem(KGiTONModel):
    id: str
    name: str
    price: float
    quantity: int = 1


class GeneratePaymentRequest(KGiTONModel):
    transaction_id: str
    amount: float
    license_key: str
    payment_type: PartnerPaymentType = PartnerPaymentType.CHECKOUT_PAGE
    description: Optional[str] = None
    back_url: Optional[str] = None
    webhook_url: Optional[str] = None
    expiry_minutes: Optional[int] = None
    items: Optional[List[PaymentItem]] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None


class QRISData(KGiTONModel):
    qr_content: Optional[str] = None
    qr_image_url: Optional[str] = None


class GeneratePaymentResponse(KGiTONModel):
    success: bool = True
    transaction_id: str
    payment_type: Optional[str] = None
    amount: float = 0
    gateway_provider: Optional[str] = None
    gateway_transaction_id: Optional[str] = None
    expires_at: Optional[str] = None
    payment_url: Optional[str] = None
    qris: Optional[QRISData] = None


class GenerateQRISRequest(KGiTONModel):
    """Legacy QRIS-only request."""
    amount: float
    transaction_id: str
    description: Optional[str] = None


class GenerateQRISResponse(KGiTONModel):
    transaction_id: str
    amount: float = 0
    gateway_provider: Optional[str] = None
    gateway_transaction_id: Optional[str] = None
    expires_at: Optional[str] = None
    qris: Optional[QRISData] = None


class PaymentStatusResponse(KGiTONModel):
    transaction_id: str
    status: str
    amount: float = 0
    paid_at: Optional[str] = None
    gateway_transaction_id: Optional[str] = None


class PaymentWebhookPayload(KGiTONModel):
    """Body KGiTON POSTs to a partner's ``webhook_url``."""
    transaction_id: str
    payment_status: WebhookPaymentStatus
    amount: float
    paid_at: Optional[str] = None
    payment_type: Optional[PartnerPaymentType] = None
    gateway_transaction_id: Optional[str] = None
