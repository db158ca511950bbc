"""Custom exceptions for the OpenAI connector."""

from typing import Any


class OpenAIConnectorError(Exception):
    """Base exception for connector errors."""

    def __init__(
        self,
        message: str,
        error_type: str = "connector_error",
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.details = details or {}


class ConfigValidationError(OpenAIConnectorError):
    """An optional connection sub-config does not match its expected shape."""

    def __init__(
        self,
        field: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message or f"Invalid connection configuration for '{field}'",
            error_type="config_validation_error",
            details=details,
        )
        self.field = field


class BodyEncodingError(OpenAIConnectorError):
    """A multipart payload could not be serialized."""

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(
            message=message or f"Cannot encode multipart field '{field}'",
            error_type="body_encoding_error",
            details={"field": field},
        )
        self.field = field


class TransportError(OpenAIConnectorError):
    """Network failure, non-success status or undecodable response body."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
        error_type: str = "transport_error",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_type=error_type,
            status_code=status_code,
            details=details,
        )
        self.body = body


class CircuitOpenError(TransportError):
    """Request rejected because the circuit breaker is open."""

    def __init__(self, message: str = "Circuit breaker is open") -> None:
        super().__init__(message=message, error_type="circuit_open_error")
