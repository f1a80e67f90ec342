from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .resource_error import ResourceError


ERROR_DOMAIN = "resource_client"
DEBUG_ERROR_CODE = -1


class ClientError(Exception):
    """Base class for client-side structured errors."""

    code: str = "client_error"
    numeric_code: int = 0

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ParseClientError(ClientError):
    code = "parse_error"
    numeric_code = 1


class NetworkClientError(ClientError):
    code = "network_error"
    numeric_code = 2


class TimeoutClientError(ClientError):
    code = "timeout_error"
    numeric_code = 3


class TransportSecurityError(ClientError):
    code = "transport_security_error"
    numeric_code = 4


class StatusClientError(ClientError):
    code = "status_error"
    numeric_code = 5


class ValidationClientError(ClientError):
    code = "validation_error"
    numeric_code = 6


ERROR_CLASSES: tuple[type[ClientError], ...] = (
    ClientError,
    ParseClientError,
    NetworkClientError,
    TimeoutClientError,
    TransportSecurityError,
    StatusClientError,
    ValidationClientError,
)


def code_for_numeric(numeric_code: int) -> str:
    for error_class in ERROR_CLASSES:
        if error_class.numeric_code == numeric_code:
            return error_class.code
    return ClientError.code


class RequestFailedError(ClientError):
    """Raised by the client; wraps the normalized error for the failed request."""

    code = "request_failed"

    def __init__(self, error: ResourceError):
        super().__init__(error.user_message)
        self.error = error
