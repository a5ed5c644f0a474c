"""Error types shared by the store, the poller and the API."""
from __future__ import annotations


class ServiceError(Exception):
    """Base error for the service layer."""


class StoreError(ServiceError):
    """Raised when a storage operation fails or times out."""


class InvalidLevelError(ServiceError):
    """Raised when a level value is missing or not a number."""


class UpstreamError(ServiceError):
    """Raised when the sensor backend cannot produce a usable reading."""
