"""Hashing and token caching primitives."""

from payhere.core.hashing import (
    encode_app_credentials,
    format_amount,
    generate_payment_hash,
    verify_payment_signature,
)
from payhere.core.token_cache import AccessToken, TokenCache

__all__ = [
    "AccessToken",
    "TokenCache",
    "encode_app_credentials",
    "format_amount",
    "generate_payment_hash",
    "verify_payment_signature",
]
