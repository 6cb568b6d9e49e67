"""Exception hierarchy for the PayHere SDK."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of failure surfaced by the SDK."""

    CREDENTIALS_MISSING = "credentials_missing"
    INVALID_REFUND_AMOUNT = "invalid_refund_amount"
    TOKEN_ACQUISITION_FAILED = "token_acquisition_failed"
    REQUEST_FAILED = "request_failed"


class PayHereError(Exception):
    """Base exception for all PayHere SDK errors.

    Callers can branch on ``kind`` instead of matching message text.
    """

    kind: ErrorKind = ErrorKind.REQUEST_FAILED

    def __init__(self, message: str = "PayHere request failed") -> None:
        self.message = message
        super().__init__(self.message)


class CredentialsMissing(PayHereError):
    """Raised before any I/O when merchant or app credentials are empty."""

    kind = ErrorKind.CREDENTIALS_MISSING

    def __init__(self, message: str = "Credentials missing") -> None:
        super().__init__(message)


class InvalidRefundAmount(PayHereError):
    """Raised when a partial refund is requested without a positive amount."""

    kind = ErrorKind.INVALID_REFUND_AMOUNT

    def __init__(self, message: str = "Partial refund requires an amount greater than 0") -> None:
        super().__init__(message)


class TokenAcquisitionFailed(PayHereError):
    """Raised when the OAuth token endpoint cannot issue an access token."""

    kind = ErrorKind.TOKEN_ACQUISITION_FAILED

    def __init__(
        self,
        reason: str = "unknown error",
        original_error: Exception | None = None,
    ) -> None:
        self.reason = reason
        self.original_error = original_error
        super().__init__(f"Failed to get access token: {reason}")


class RequestFailed(PayHereError):
    """Raised when an authorized API call fails.

    Wraps transport errors, timeouts, unparsable bodies and gateway error
    responses so that callers never see httpx exception types.
    """

    kind = ErrorKind.REQUEST_FAILED

    def __init__(
        self,
        operation: str,
        reason: str = "unknown error",
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        self.operation = operation
        self.reason = reason
        self.status_code = status_code
        self.original_error = original_error
        super().__init__(f"[{operation}] {reason}")


__all__ = [
    "ErrorKind",
    "PayHereError",
    "CredentialsMissing",
    "InvalidRefundAmount",
    "TokenAcquisitionFailed",
    "RequestFailed",
]
