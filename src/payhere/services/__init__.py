"""PayHere API services."""

from payhere.services.base import BaseService
from payhere.services.client import PayHere

__all__ = ["BaseService", "PayHere"]
