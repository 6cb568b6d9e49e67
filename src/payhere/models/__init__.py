"""PayHere data models."""

from payhere.models.payment import (
    AmountDetail,
    Currency,
    Customer,
    DeliveryDetails,
    PayHereResponse,
    PaymentItem,
    PaymentMethod,
    PaymentNotification,
    PaymentRecord,
    PaymentRecordStatus,
    PaymentRequestData,
    PaymentRetrievalResponse,
    PaymentStatusCode,
    RefundResponse,
    RefundType,
    TokenErrorResponse,
    TokenResponse,
)

__all__ = [
    "AmountDetail",
    "Currency",
    "Customer",
    "DeliveryDetails",
    "PayHereResponse",
    "PaymentItem",
    "PaymentMethod",
    "PaymentNotification",
    "PaymentRecord",
    "PaymentRecordStatus",
    "PaymentRequestData",
    "PaymentRetrievalResponse",
    "PaymentStatusCode",
    "RefundResponse",
    "RefundType",
    "TokenErrorResponse",
    "TokenResponse",
]
