"""PayHere payment gateway SDK.

Checkout hash generation, payment notification verification, payment
retrieval and refunds for the PayHere merchant API.
"""

from payhere.config import PayHereSettings
from payhere.core.hashing import (
    format_amount,
    generate_payment_hash,
    verify_payment_signature,
)
from payhere.exceptions import (
    CredentialsMissing,
    ErrorKind,
    InvalidRefundAmount,
    PayHereError,
    RequestFailed,
    TokenAcquisitionFailed,
)
from payhere.models import (
    Currency,
    PaymentNotification,
    PaymentRecord,
    PaymentRecordStatus,
    PaymentRetrievalResponse,
    PaymentStatusCode,
    RefundResponse,
    RefundType,
    TokenResponse,
)
from payhere.services.client import PayHere

__version__ = "0.1.0"

__all__ = [
    "PayHere",
    "PayHereSettings",
    "generate_payment_hash",
    "verify_payment_signature",
    "format_amount",
    "ErrorKind",
    "PayHereError",
    "CredentialsMissing",
    "InvalidRefundAmount",
    "TokenAcquisitionFailed",
    "RequestFailed",
    "Currency",
    "PaymentNotification",
    "PaymentRecord",
    "PaymentRecordStatus",
    "PaymentRetrievalResponse",
    "PaymentStatusCode",
    "RefundResponse",
    "RefundType",
    "TokenResponse",
]
