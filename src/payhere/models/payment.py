"""PayHere payment models.

Response models are lenient: the gateway response is trusted and its
fields are re-exposed as received, including keys not declared here.
Leaf values are typed ``Any`` so numbers and strings come back exactly as
the gateway sent them, and a nested block that does not look like the
documented object is kept as the raw value.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Currency(str, Enum):
    """Currencies accepted by PayHere checkout."""

    LKR = "LKR"
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    AUD = "AUD"


class PaymentRecordStatus(str, Enum):
    """Status of a payment as reported by the retrieval API."""

    RECEIVED = "RECEIVED"
    REFUND_REQUESTED = "REFUND REQUESTED"
    REFUND_PROCESSING = "REFUND PROCESSING"
    REFUNDED = "REFUNDED"
    CHARGEBACKED = "CHARGEBACKED"


class PaymentStatusCode(IntEnum):
    """status_code values sent in payment notifications"""
    SUCCESS = 2
    PENDING = 0
    CANCELED = -1
    FAILED = -2
    CHARGEDBACK = -3


class RefundType(str, Enum):
    FULL = "full"
    PARTIAL = "partial"


class _GatewayModel(BaseModel):
    model_config = ConfigDict(extra="allow")


# ==================== OAuth ====================


class TokenResponse(_GatewayModel):
    """Successful response of the OAuth token endpoint."""

    access_token: str = Field(min_length=1)
    token_type: str = "bearer"
    expires_in: float = Field(gt=0, description="Token lifetime in seconds")


class TokenErrorResponse(_GatewayModel):
    """OAuth style error body: ``{error, error_description}``."""

    error: Any = None
    error_description: Any = None


# ==================== Payment records ====================

# Nested blocks: the documented model when the value fits it, else the raw value
_NESTED = {"default": None, "union_mode": "left_to_right"}


class DeliveryDetails(_GatewayModel):
    address: Any = None
    city: Any = None
    country: Any = None


class Customer(_GatewayModel):
    """Customer block of a payment record.

    The gateway spells the first name key ``fist_name``.
    """

    fist_name: Any = None
    last_name: Any = None
    email: Any = None
    phone: Any = None
    delivery_details: Union[DeliveryDetails, Any] = Field(**_NESTED)


class AmountDetail(_GatewayModel):
    currency: Any = None
    gross: Any = None
    fee: Any = None
    net: Any = None
    exchange_rate: Any = None
    exchange_from: Any = None
    exchange_to: Any = None


class PaymentMethod(_GatewayModel):
    method: Any = Field(default=None, description="VISA, MASTER, AMEX, EZCASH, ...")
    card_customer_name: Any = None
    card_no: Any = None


class PaymentItem(_GatewayModel):
    name: Any = None
    quantity: Any = None
    currency: Any = None
    unit_price: Any = None
    total_price: Any = None


class PaymentRequestData(_GatewayModel):
    custom1: Any = None
    custom2: Any = None


class PaymentRecord(_GatewayModel):
    """A payment returned by the payment search API."""

    payment_id: Any = None
    order_id: Any = None
    date: Any = None
    description: Any = None
    status: Any = Field(default=None, description="See PaymentRecordStatus")
    currency: Any = None
    amount: Any = None
    customer: Union[Customer, Any] = Field(**_NESTED)
    amount_detail: Union[AmountDetail, Any] = Field(**_NESTED)
    payment_method: Union[PaymentMethod, Any] = Field(**_NESTED)
    items: Union[List[PaymentItem], Any] = Field(**_NESTED)
    request: Union[PaymentRequestData, Any] = Field(**_NESTED)

    @property
    def record_status(self) -> Optional[PaymentRecordStatus]:
        """Status as an enum member, None when missing or unknown."""
        try:
            return PaymentRecordStatus(self.status)
        except (TypeError, ValueError):
            return None


# ==================== API envelopes ====================


class PayHereResponse(_GatewayModel):
    """Standard merchant API envelope: ``{status, msg, data}``."""

    status: Any = None
    msg: Any = None
    data: Any = None


class PaymentRetrievalResponse(PayHereResponse):
    data: Union[List[PaymentRecord], Any] = Field(**_NESTED)


class RefundResponse(PayHereResponse):
    """Refund envelope; ``data`` carries the refunded amount."""


# ==================== Notifications ====================


class PaymentNotification(_GatewayModel):
    """Payment notification posted by PayHere to the merchant notify_url."""

    merchant_id: Optional[str] = None
    order_id: str
    payment_id: Optional[str] = None
    payhere_amount: str
    payhere_currency: str
    status_code: int
    md5sig: str
    status_message: Optional[str] = None
    method: Optional[str] = None
    card_holder_name: Optional[str] = None
    card_no: Optional[str] = None
    card_expiry: Optional[str] = None
    custom_1: Optional[str] = None
    custom_2: Optional[str] = None

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    @property
    def status(self) -> Optional[PaymentStatusCode]:
        try:
            return PaymentStatusCode(self.status_code)
        except ValueError:
            return None

    @property
    def is_success(self) -> bool:
        return self.status_code == PaymentStatusCode.SUCCESS

