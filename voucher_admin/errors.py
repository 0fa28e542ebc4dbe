"""
Error kinds raised by the admin service.

Repositories and the platform client convert transport failures into one of
these before anything reaches a router, so API code never inspects httpx
objects.
"""

from typing import Any, Dict, Optional


class AdminError(Exception):
    """Base class for every error the admin service reports."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedResponse(AdminError):
    """A platform payload matched none of the known shapes."""

    status_code = 502

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.payload = payload


class ValidationError(AdminError):
    """Field-scoped form errors. Blocks submission until corrected."""

    status_code = 422

    def __init__(self, message: str, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.fields = fields or {}


class NotFound(AdminError):
    status_code = 404


class AlreadyRedeemed(AdminError):
    status_code = 409

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(message or f"Voucher {code} has already been redeemed")
        self.code = code


class Expired(AdminError):
    status_code = 410

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(message or f"Voucher {code} has expired")
        self.code = code


class RedemptionError(AdminError):
    """
    The platform refused a redemption attempt (e.g. a concurrent redemption won).

    `current` holds the voucher as re-fetched after the failure, when available.
    """

    status_code = 409

    def __init__(self, message: str, code: str, current: Any = None):
        super().__init__(message)
        self.code = code
        self.current = current


class NetworkError(AdminError):
    """No response was received from the platform API."""

    status_code = 503


class AuthenticationError(AdminError):
    status_code = 401


class ApiError(AdminError):
    """Platform answered with an error status that has no more specific kind."""

    def __init__(self, message: str, status_code: int, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload
