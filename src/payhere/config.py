"""
PayHere SDK - Configuration
Loads merchant/app credentials from environment variables
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# API endpoints
SANDBOX_BASE_URL = "https://sandbox.payhere.lk"
PRODUCTION_BASE_URL = "https://www.payhere.lk"
API_VERSION = "v1"

DEFAULT_REQUEST_TIMEOUT_MS = 20_000


def base_url_for(sandbox_enabled: bool) -> str:
    return SANDBOX_BASE_URL if sandbox_enabled else PRODUCTION_BASE_URL


@dataclass(frozen=True)
class PayHereSettings:
    """Client configuration; immutable once built"""

    merchant_id: str
    merchant_secret: str
    app_id: str
    app_secret: str
    sandbox_enabled: bool = True
    request_timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS

    @property
    def base_url(self) -> str:
        return base_url_for(self.sandbox_enabled)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "PayHereSettings":
        """Create settings from environment variables.

        A ``.env`` file is loaded first when present (explicit path, or the
        default lookup from the current directory). Variables already set
        in the environment win.
        """
        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv()

        return cls(
            merchant_id=os.getenv("PAYHERE_MERCHANT_ID", ""),
            merchant_secret=os.getenv("PAYHERE_MERCHANT_SECRET", ""),
            app_id=os.getenv("PAYHERE_APP_ID", ""),
            app_secret=os.getenv("PAYHERE_APP_SECRET", ""),
            sandbox_enabled=os.getenv("PAYHERE_SANDBOX", "true").lower() == "true",
            request_timeout_ms=int(
                os.getenv("PAYHERE_REQUEST_TIMEOUT_MS", str(DEFAULT_REQUEST_TIMEOUT_MS))
            ),
        )

    def validate_required(self) -> List[str]:
        """Return names of the missing required variables."""
        missing = []
        if not self.merchant_id:
            missing.append("PAYHERE_MERCHANT_ID")
        if not self.merchant_secret:
            missing.append("PAYHERE_MERCHANT_SECRET")
        if not self.app_id:
            missing.append("PAYHERE_APP_ID")
        if not self.app_secret:
            missing.append("PAYHERE_APP_SECRET")
        return missing

    def validate(self) -> None:
        """Raise ValueError if the request timeout is not positive."""
        if self.request_timeout_ms <= 0:
            raise ValueError("PAYHERE_REQUEST_TIMEOUT_MS must be positive")
