"""Checkout hash generation and webhook signature verification.

PayHere authorizes a checkout by recomputing an MD5 chain on its side, so
the strings built here have to match the gateway byte for byte:

    checkout:  MD5(merchant_id + order_id + amount + currency + MD5(secret))
    webhook:   MD5(merchant_id + order_id + amount + currency + status_code + MD5(secret))

All digests are uppercase hex and amounts are always rendered with two
fractional digits.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping, Union

from payhere.exceptions import CredentialsMissing
from payhere.logging import get_logger
from payhere.models.payment import Currency

logger = get_logger(__name__)

Amount = Union[str, int, float, Decimal]

TWO_PLACES = Decimal("0.01")

# Webhook fields that take part in md5sig
REQUIRED_NOTIFICATION_FIELDS = (
    "order_id",
    "payhere_amount",
    "status_code",
    "md5sig",
    "payhere_currency",
)


def _md5_upper(value: str) -> str:
    return hashlib.md5(value.encode("utf-8")).hexdigest().upper()


def _currency_code(currency: Currency | str) -> str:
    if isinstance(currency, Currency):
        return currency.value
    return str(currency)


def format_amount(amount: Amount) -> str:
    """Render an amount as a fixed-point string with two decimals.

    The numeric value is rounded (half away from zero), not truncated as
    a string, so ``"1000"``, ``1000`` and ``"1000.00"`` all give
    ``"1000.00"``.

    Raises:
        ValueError: If the amount is not a finite number.
    """
    try:
        value = float(amount)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e

    if not math.isfinite(value):
        raise ValueError(f"Invalid amount: {amount!r}")
    if value == 0:
        value = 0.0  # no "-0.00"

    try:
        return str(Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e


def hash_merchant_secret(merchant_secret: str) -> str:
    """Uppercase hex MD5 of the merchant secret."""
    return _md5_upper(merchant_secret)


def encode_app_credentials(app_id: str, app_secret: str) -> str:
    """Build the Basic-auth digest sent to the OAuth token endpoint.

    Raises:
        CredentialsMissing: If app_id or app_secret is empty.
    """
    if not app_id or not app_secret:
        raise CredentialsMissing("App credentials missing")
    raw = f"{app_id}:{app_secret}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def generate_payment_hash(
    order_id: str,
    amount: Amount,
    merchant_id: str,
    merchant_secret: str,
    currency: Currency | str = Currency.LKR,
) -> str:
    """Generate the checkout hash for a payment request.

    Args:
        order_id: Merchant side order identifier.
        amount: Order amount; any numeric value or numeric string.
        merchant_id: PayHere merchant ID.
        merchant_secret: Merchant secret for the checkout domain.
        currency: Currency code, LKR by default.

    Returns:
        32-character uppercase hex digest.

    Raises:
        CredentialsMissing: If merchant_id or merchant_secret is empty.
        ValueError: If amount is not numeric.
    """
    if not merchant_id or not merchant_secret:
        raise CredentialsMissing("Merchant credentials missing")

    hashed_secret = hash_merchant_secret(merchant_secret)
    formatted_amount = format_amount(amount)

    hash_string = (
        f"{merchant_id}{order_id}{formatted_amount}"
        f"{_currency_code(currency)}{hashed_secret}"
    )
    return _md5_upper(hash_string)


def verify_payment_signature(
    payload: Mapping[str, Any],
    merchant_id: str,
    merchant_secret: str,
) -> bool:
    """Verify the md5sig of a payment notification.

    A payload missing any of the signed fields, or with an amount that is
    not numeric, is rejected with False rather than an exception.

    Raises:
        CredentialsMissing: If merchant_id or merchant_secret is empty.
    """
    if not merchant_id or not merchant_secret:
        raise CredentialsMissing("Merchant credentials missing")

    missing = [k for k in REQUIRED_NOTIFICATION_FIELDS if payload.get(k) is None]
    if missing:
        logger.warning("notification_fields_missing", missing=missing)
        return False

    try:
        formatted_amount = format_amount(payload["payhere_amount"])
    except ValueError:
        logger.warning(
            "notification_amount_invalid",
            order_id=str(payload["order_id"]),
        )
        return False

    hash_string = (
        f"{merchant_id}{payload['order_id']}{formatted_amount}"
        f"{payload['payhere_currency']}{payload['status_code']}"
        f"{hash_merchant_secret(merchant_secret)}"
    )
    expected = _md5_upper(hash_string)

    is_valid = hmac.compare_digest(
        expected.encode("utf-8"),
        str(payload["md5sig"]).encode("utf-8"),
    )
    if not is_valid:
        logger.warning("signature_mismatch", order_id=str(payload["order_id"]))
    return is_valid
