# cybertaxi/utils/errors.py
"""
Error taxonomy for the API.
Services raise these; main.py turns them into the standard envelope:
    {"status": "Error", "message": ..., "details": ...}
"""

from typing import Any, Optional


class CyberTaxiError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_envelope(self) -> dict:
        body = {"status": "Error", "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationFailed(CyberTaxiError):
    status_code = 400
    default_message = "Invalid request"


class InsufficientFunds(ValidationFailed):
    default_message = "Insufficient funds"


class Unauthenticated(CyberTaxiError):
    status_code = 401
    default_message = "No token provided"


class Forbidden(CyberTaxiError):
    status_code = 403
    default_message = "Unauthorized access to player data"


class NotFound(CyberTaxiError):
    status_code = 404
    default_message = "Player not found"


class Conflict(CyberTaxiError):
    status_code = 409
    default_message = "Resource already exists"


class UpstreamUnavailable(CyberTaxiError):
    default_message = "Failed to proxy tile request"
