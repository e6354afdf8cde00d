from __future__ import annotations

from typing import Optional


class NotifierError(Exception):
    """Base class for every failure the notifier classifies."""


class ConnectivityError(NotifierError):
    """Initial store handshake failed. Fatal at startup."""


class StoreError(NotifierError):
    """Contact query failed. The current cycle is skipped."""


class CredentialError(NotifierError):
    """Gateway credentials missing. The whole batch is skipped."""


class SendError(NotifierError):
    """One contact's SMS could not be delivered to the gateway."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TimezoneError(NotifierError):
    """Business-hours reference timezone could not be loaded."""
