"""
PayHere - Merchant API client
Checkout hashing, notification verification, payment retrieval and refunds
API Documentation: https://support.payhere.lk/api-&-mobile-sdk
"""
from __future__ import annotations

import math
import time
from functools import cached_property
from pathlib import Path
from typing import Any, Callable, Dict, Mapping

import httpx
from pydantic import ValidationError

from payhere.config import API_VERSION, PayHereSettings
from payhere.core.hashing import (
    Amount,
    encode_app_credentials,
    format_amount,
    generate_payment_hash,
    verify_payment_signature,
)
from payhere.core.token_cache import TokenCache
from payhere.exceptions import (
    CredentialsMissing,
    InvalidRefundAmount,
    RequestFailed,
    TokenAcquisitionFailed,
)
from payhere.models.payment import (
    Currency,
    PayHereResponse,
    PaymentNotification,
    PaymentRetrievalResponse,
    RefundResponse,
    RefundType,
    TokenErrorResponse,
    TokenResponse,
)
from payhere.services.base import BaseService


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _extract_error_message(body: Any) -> str | None:
    """Pull the message out of a gateway error body.

    Two shapes are known: the merchant API envelope ``{status, msg, data}``
    and the OAuth style ``{error, error_description}``.
    """
    if not isinstance(body, dict):
        return None
    if "status" in body:
        envelope = PayHereResponse.model_validate(body)
        return str(envelope.msg or f"Gateway status {envelope.status}")
    if "error" in body:
        oauth_error = TokenErrorResponse.model_validate(body)
        return str(oauth_error.error_description or oauth_error.error)
    return None


class PayHere(BaseService):
    """PayHere merchant API client.

    Holds immutable merchant/app credentials and one cached access token.
    Hashing and verification are local; payment retrieval and refunds are
    authorized with a bearer token fetched from the OAuth endpoint on
    first use and reused until it expires.
    """

    OP_TOKEN = "oauth_token"
    OP_PAYMENT_SEARCH = "payment_search"
    OP_REFUND = "payment_refund"

    def __init__(
        self,
        merchant_id: str,
        merchant_secret: str,
        app_id: str,
        app_secret: str,
        sandbox_enabled: bool = True,
        request_timeout_ms: int = 20_000,
        client: httpx.AsyncClient | None = None,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = PayHereSettings(
            merchant_id=merchant_id,
            merchant_secret=merchant_secret,
            app_id=app_id,
            app_secret=app_secret,
            sandbox_enabled=sandbox_enabled,
            request_timeout_ms=request_timeout_ms,
        )
        self.settings.validate()
        super().__init__(httpx.Timeout(request_timeout_ms / 1000), client)
        self._token_cache = TokenCache(timer=timer)

    @classmethod
    def from_settings(
        cls,
        settings: PayHereSettings,
        client: httpx.AsyncClient | None = None,
    ) -> "PayHere":
        return cls(
            merchant_id=settings.merchant_id,
            merchant_secret=settings.merchant_secret,
            app_id=settings.app_id,
            app_secret=settings.app_secret,
            sandbox_enabled=settings.sandbox_enabled,
            request_timeout_ms=settings.request_timeout_ms,
            client=client,
        )

    @classmethod
    def from_env(
        cls,
        env_file: str | Path | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> "PayHere":
        """Build a client from PAYHERE_* environment variables."""
        return cls.from_settings(PayHereSettings.from_env(env_file), client=client)

    # ==================== Endpoints ====================

    @property
    def base_url(self) -> str:
        return self.settings.base_url

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/merchant/{API_VERSION}"

    @property
    def checkout_url(self) -> str:
        """URL the checkout form posts to."""
        return f"{self.base_url}/pay/checkout"

    # ==================== Hashing ====================

    def _require_merchant_credentials(self) -> None:
        if not self.settings.merchant_id or not self.settings.merchant_secret:
            raise CredentialsMissing("Merchant credentials missing")

    def generate_payment_hash(
        self,
        order_id: str,
        amount: Amount,
        currency: Currency | str = Currency.LKR,
    ) -> str:
        """Checkout hash for this merchant; see ``payhere.generate_payment_hash``."""
        return generate_payment_hash(
            order_id,
            amount,
            self.settings.merchant_id,
            self.settings.merchant_secret,
            currency,
        )

    def verify_payment_signature(self, payload: Mapping[str, Any]) -> bool:
        return verify_payment_signature(
            payload,
            self.settings.merchant_id,
            self.settings.merchant_secret,
        )

    def parse_notification(self, payload: Mapping[str, Any]) -> PaymentNotification | None:
        """
        Verify and parse a payment notification posted to notify_url.

        Returns:
            Typed notification, or None if the signature does not verify
        """
        if not self.verify_payment_signature(payload):
            self.logger.error("notification_rejected", order_id=payload.get("order_id"))
            return None

        try:
            notification = PaymentNotification.model_validate(dict(payload))
        except ValidationError as e:
            self.logger.error(
                "notification_invalid",
                order_id=payload.get("order_id"),
                error=str(e),
            )
            return None

        self.logger.info(
            "notification_verified",
            order_id=notification.order_id,
            payment_id=notification.payment_id,
            status_code=notification.status_code,
        )
        return notification

    # ==================== OAuth ====================

    @cached_property
    def _authorization_digest(self) -> str:
        # Not cached when it raises, so missing credentials fail every call
        return encode_app_credentials(self.settings.app_id, self.settings.app_secret)

    async def get_access_token(self) -> str:
        """
        Return a valid bearer token, fetching a new one only when the
        cached token is missing or expired.

        Raises:
            CredentialsMissing: App credentials are empty
            TokenAcquisitionFailed: The token endpoint did not issue a token
        """
        digest = self._authorization_digest
        return await self._token_cache.get_or_acquire(lambda: self._fetch_access_token(digest))

    async def _fetch_access_token(self, digest: str) -> TokenResponse:
        try:
            response = await self._post(
                f"{self.api_url}/oauth/token",
                self.OP_TOKEN,
                data={"grant_type": "client_credentials"},
                headers={"Authorization": f"Basic {digest}", "Accept": "application/json"},
            )
        except RequestFailed as e:
            raise TokenAcquisitionFailed(e.reason, original_error=e.original_error) from e

        body = _json_or_none(response)

        if not response.is_success:
            reason = _extract_error_message(body) or f"HTTP {response.status_code}"
            self.logger.warning(
                "token_request_rejected",
                status_code=response.status_code,
                reason=reason,
            )
            raise TokenAcquisitionFailed(reason)

        try:
            token = TokenResponse.model_validate(body)
        except ValidationError as e:
            self.logger.warning("token_response_malformed", error=str(e))
            raise TokenAcquisitionFailed("Malformed token response", original_error=e) from e

        self.logger.info("token_acquired")
        return token

    # ==================== Merchant API ====================

    async def _authorized_request(
        self,
        method: str,
        path: str,
        operation: str,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        token = await self.get_access_token()
        response = await self._request(
            method,
            f"{self.api_url}{path}",
            operation,
            headers={"Authorization": f"Bearer {token}", "Accept": "application/json"},
            **kwargs,
        )

        body = _json_or_none(response)

        if not response.is_success:
            message = _extract_error_message(body)
            self.logger.warning(
                "request_failed",
                operation=operation,
                status_code=response.status_code,
                reason=message,
            )
            raise RequestFailed(
                operation,
                message or f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        if not isinstance(body, dict):
            raise RequestFailed(
                operation,
                f"Invalid JSON response: {response.text[:200]}",
                status_code=response.status_code,
            )
        return body

    async def get_payment_details(self, order_id: str) -> PaymentRetrievalResponse:
        """
        Retrieve payments made for an order.

        API: GET /merchant/v1/payment/search?order_id=...

        Raises:
            CredentialsMissing: Merchant or app credentials are empty
            TokenAcquisitionFailed: No access token could be obtained
            ValueError: Empty order_id
            RequestFailed: Transport failure or gateway error
        """
        self._require_merchant_credentials()
        if not order_id:
            raise ValueError("order_id is required")

        body = await self._authorized_request(
            "GET",
            "/payment/search",
            self.OP_PAYMENT_SEARCH,
            params={"order_id": order_id},
        )

        try:
            result = PaymentRetrievalResponse.model_validate(body)
        except ValidationError as e:
            raise RequestFailed(
                self.OP_PAYMENT_SEARCH,
                f"Malformed response: {e}",
                original_error=e,
            ) from e

        self.logger.info(
            "payment_details_fetched",
            order_id=order_id,
            payments=len(result.data) if isinstance(result.data, list) else 0,
        )
        return result

    async def refund_payment(
        self,
        payment_id: str | int,
        reason: str,
        amount: Amount = 0,
        refund_type: RefundType | str = RefundType.FULL,
    ) -> RefundResponse:
        """
        Refund a payment in full or in part.

        API: POST /merchant/v1/payment/refund

        Args:
            payment_id: PayHere payment ID
            reason: Refund reason shown to the customer
            amount: Amount for a partial refund; ignored for a full refund
            refund_type: "full" or "partial"

        Raises:
            CredentialsMissing: Merchant or app credentials are empty
            InvalidRefundAmount: Partial refund without a positive amount
            ValueError: Unknown refund_type
            TokenAcquisitionFailed: No access token could be obtained
            RequestFailed: Transport failure or gateway error
        """
        self._require_merchant_credentials()
        refund_type = RefundType(refund_type)

        payload: Dict[str, Any] = {"payment_id": payment_id, "reason": reason}

        if refund_type is RefundType.PARTIAL:
            try:
                value = float(amount)
            except (TypeError, ValueError) as e:
                raise InvalidRefundAmount(f"Invalid refund amount: {amount!r}") from e
            if not math.isfinite(value) or value <= 0:
                raise InvalidRefundAmount()
            payload["amount"] = format_amount(value)

        body = await self._authorized_request(
            "POST",
            "/payment/refund",
            self.OP_REFUND,
            json=payload,
        )

        try:
            result = RefundResponse.model_validate(body)
        except ValidationError as e:
            raise RequestFailed(
                self.OP_REFUND,
                f"Malformed response: {e}",
                original_error=e,
            ) from e

        self.logger.info(
            "payment_refunded",
            payment_id=payment_id,
            refund_type=refund_type.value,
            refunded=result.data,
        )
        return result
