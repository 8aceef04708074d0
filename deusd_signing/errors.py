"""
Centralized Exceptions - order signing error taxonomy.
Every failure carries the offending field and value in `details`.
"""

import re
from typing import Dict, Any, Optional


class DeusdSigningError(Exception):
    """Base exception for the deUSD signing package."""

    def __init__(self, message: str, error_code: str = "UNKNOWN", details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class MalformedTypeTag(DeusdSigningError):
    """Type tag string is not `<address>::<module>::<name>`."""

    def __init__(self, message: str = "Malformed type tag", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "MALFORMED_TYPE_TAG", details)


class EncodingError(DeusdSigningError):
    """Value cannot be represented in its declared width."""

    def __init__(self, message: str = "Encoding failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "ENCODING_ERROR", details)


class KeyUnavailable(DeusdSigningError):
    """Signing requested without a configured key."""

    def __init__(self, message: str = "No signing key configured", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "KEY_UNAVAILABLE", details)


class ConfigurationError(DeusdSigningError):
    """Configuration error."""

    def __init__(self, message: str = "Configuration error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONFIG_ERROR", details)


def sanitize_error_message(message: str) -> str:
    """Sanitize error messages to prevent information leakage."""
    sensitive_patterns = [
        "password", "secret", "private", "mnemonic", "seed",
    ]

    sanitized = message
    for pattern in sensitive_patterns:
        sanitized = re.sub(pattern, "***", sanitized, flags=re.IGNORECASE)

    return sanitized


def create_structured_error_response(error: Exception) -> Dict[str, Any]:
    """Create structured error response for logging and operator output."""
    if isinstance(error, DeusdSigningError):
        return {
            "error_type": error.error_code,
            "message": sanitize_error_message(error.message),
            "details": error.details,
        }
    return {
        "error_type": "UNKNOWN_ERROR",
        "message": sanitize_error_message(str(error)),
        "details": {},
    }
