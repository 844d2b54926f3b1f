"""AxiTrace error taxonomy.

Every error raised by the SDK derives from :class:`AxiTraceError` and
carries an HTTP-style ``status_code`` plus a free-form ``context`` dict.

- ConfigurationError  — bad secret key, base URL or timeout (construction time)
- ValidationError     — an event failed ``validate()`` (never touches the network)
- AuthenticationError — the API answered 401 / 403
- ApiError            — any other non-2xx answer, or a connection failure
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, Iterable, Optional


class AxiTraceError(Exception):
    """Base exception for all AxiTrace SDK errors."""

    def __init__(
        self,
        message: str = "",
        status_code: int = 0,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.context: Dict[str, Any] = context or {}


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(AxiTraceError):
    """SDK configuration is invalid or missing."""

    @classmethod
    def missing_secret_key(cls) -> ConfigurationError:
        return cls(
            "Secret key is required. Please provide a valid AxiTrace secret key.",
            400,
        )

    @classmethod
    def invalid_secret_key(cls, key: str) -> ConfigurationError:
        return cls(
            'Invalid secret key format. Secret key should start with "sk_live_" '
            'or "sk_test_".',
            400,
            {"provided_prefix": key[:8] + "..."},
        )

    @classmethod
    def invalid_base_url(cls, url: str) -> ConfigurationError:
        return cls(
            "Invalid base URL provided. Please provide a valid HTTP/HTTPS URL.",
            400,
            {"provided_url": url},
        )

    @classmethod
    def invalid_timeout(cls, timeout: Any) -> ConfigurationError:
        return cls(
            "Invalid timeout value. Timeout must be a positive integer.",
            400,
            {"provided_timeout": timeout},
        )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class ValidationReason(str, Enum):
    """Categories of event validation failures."""

    MISSING_USER_IDENTIFIER = "missing_user_identifier"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    VALUE_NOT_POSITIVE = "value_not_positive"
    EMPTY_ITEMS = "empty_items"
    INVALID_EMAIL = "invalid_email"
    INVALID_VALUE = "invalid_value"


class ValidationError(AxiTraceError):
    """An event failed local validation.

    ``reason`` tells callers which rule was broken; ``field`` names the
    offending field when there is one.
    """

    def __init__(
        self,
        message: str,
        reason: ValidationReason,
        *,
        field: Optional[str] = None,
        event_type: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, 400, context)
        self.reason = reason
        self.field = field
        self.event_type = event_type

    @classmethod
    def missing_user_identifier(cls) -> ValidationError:
        return cls(
            "missing user identifier: at least one of client_id, user_id "
            "or session_id is required",
            ValidationReason.MISSING_USER_IDENTIFIER,
        )

    @classmethod
    def missing_required_field(
        cls, field: str, event_type: Optional[str] = None
    ) -> ValidationError:
        message = f"missing required field: {field}"
        if event_type is not None:
            message += f" (for {event_type} event)"
        return cls(
            message,
            ValidationReason.MISSING_REQUIRED_FIELD,
            field=field,
            event_type=event_type,
            context={"field": field, "event_type": event_type},
        )

    @classmethod
    def value_must_be_positive(cls, field: str, value: Any) -> ValidationError:
        return cls(
            f"{field} must be positive, got: {value}",
            ValidationReason.VALUE_NOT_POSITIVE,
            field=field,
            context={"field": field, "value": value},
        )

    @classmethod
    def empty_items(cls, field: str = "items") -> ValidationError:
        return cls(
            f"{field} cannot be empty",
            ValidationReason.EMPTY_ITEMS,
            field=field,
        )

    @classmethod
    def invalid_email(cls, email: str, field: str = "email") -> ValidationError:
        return cls(
            "invalid email format provided",
            ValidationReason.INVALID_EMAIL,
            field=field,
            context={"email": email},
        )

    @classmethod
    def invalid_value(
        cls, field: str, value: Any, allowed: Iterable[str]
    ) -> ValidationError:
        allowed = list(allowed)
        return cls(
            f"invalid {field}: {value}. Valid values: {', '.join(allowed)}",
            ValidationReason.INVALID_VALUE,
            field=field,
            context={"field": field, "value": value, "allowed": allowed},
        )

    @classmethod
    def unserializable_payload(cls, detail: str) -> ValidationError:
        return cls(
            f"payload is not JSON serializable: {detail}",
            ValidationReason.INVALID_VALUE,
            field="params",
            context={"detail": detail},
        )


# ---------------------------------------------------------------------------
# Transport-level errors
# ---------------------------------------------------------------------------


class AuthenticationError(AxiTraceError):
    """The API rejected the credentials (401) or denied access (403)."""

    @classmethod
    def unauthorized(cls) -> AuthenticationError:
        return cls(
            "Authentication failed. Please check your API secret key.", 401
        )

    @classmethod
    def forbidden(cls, reason: Optional[str] = None) -> AuthenticationError:
        message = "Access forbidden."
        if reason:
            message += f" {reason}"
        return cls(message, 403)


_STATUS_MESSAGES: Dict[int, str] = {
    400: "Bad request. Please check your request parameters.",
    401: "Unauthorized. Please check your API key.",
    403: "Forbidden. You do not have access to this resource.",
    404: "Not found. The requested resource does not exist.",
    405: "Method not allowed.",
    408: "Request timeout.",
    422: "Unprocessable entity. The request was well-formed but contains "
    "semantic errors.",
    429: "Too many requests. Please slow down.",
    500: "Internal server error. Please try again later.",
    502: "Bad gateway. The server received an invalid response.",
    503: "Service unavailable. Please try again later.",
    504: "Gateway timeout.",
}


class ApiError(AxiTraceError):
    """Non-2xx API response or connection-level failure.

    ``status_code`` is 0 when no response was received at all.
    """

    def __init__(self, message: str, status_code: int, body: Optional[str] = None):
        super().__init__(message, status_code)
        self.body = body

    @classmethod
    def from_response(cls, status_code: int, body: Optional[str] = None) -> ApiError:
        message = _STATUS_MESSAGES.get(status_code, f"HTTP error {status_code}")
        if body:
            try:
                decoded = json.loads(body)
            except ValueError:
                decoded = None
            if isinstance(decoded, dict):
                if decoded.get("error") is not None:
                    message = str(decoded["error"])
                elif decoded.get("message") is not None:
                    message = str(decoded["message"])
        return cls(message, status_code, body)

    @classmethod
    def connection_error(cls, detail: str) -> ApiError:
        return cls(f"Connection error: {detail}", 0)
