from __future__ import annotations

import ssl
from dataclasses import dataclass, field

import httpx

from .errors import (
    DEBUG_ERROR_CODE,
    ERROR_DOMAIN,
    ClientError,
    NetworkClientError,
    ParseClientError,
    TimeoutClientError,
    TransportSecurityError,
)

TLS_MESSAGE_MARKERS = ("CERTIFICATE_VERIFY_FAILED", "SSL", "TLS", "certificate")


@dataclass(frozen=True)
class DiagnosticError:
    """Origin-specific error detail kept for debugging, never for display."""

    domain: str
    code: int
    description: str
    cause: BaseException | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_debug_message(cls, debug_message: str) -> DiagnosticError:
        return cls(domain=ERROR_DOMAIN, code=DEBUG_ERROR_CODE, description=debug_message)

    @classmethod
    def from_exception(cls, exc: BaseException) -> DiagnosticError:
        classified = classify_exception(exc)
        if classified is not None:
            return cls(
                domain=ERROR_DOMAIN,
                code=classified.numeric_code,
                description=classified.message,
                cause=exc,
            )

        exc_type = type(exc)
        return cls(
            domain=f"{exc_type.__module__}.{exc_type.__qualname__}",
            code=0,
            description=str(exc),
            cause=exc,
        )


def _iter_chain(exc: BaseException):
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def _is_tls_failure(exc: BaseException) -> bool:
    for link in _iter_chain(exc):
        if isinstance(link, ssl.SSLError):
            return True
    message = str(exc)
    return any(marker in message for marker in TLS_MESSAGE_MARKERS)


def classify_exception(exc: BaseException) -> ClientError | None:
    """Map a transport-layer exception onto the client error taxonomy.

    Returns ``None`` for exceptions with no known origin so callers can keep
    their own description.
    """
    if isinstance(exc, ClientError):
        return exc
    if isinstance(exc, httpx.TimeoutException):
        return TimeoutClientError("The request timed out.")
    if isinstance(exc, httpx.DecodingError):
        return ParseClientError("The server response could not be read.")
    if isinstance(exc, ssl.SSLError) or (isinstance(exc, httpx.TransportError) and _is_tls_failure(exc)):
        return TransportSecurityError("A secure connection to the server could not be established.")
    if isinstance(exc, httpx.TransportError):
        return NetworkClientError("Could not connect to the server.")
    if isinstance(exc, httpx.TooManyRedirects):
        return NetworkClientError("The server redirected too many times.")
    if isinstance(exc, httpx.RequestError):
        return NetworkClientError("The request could not be completed.")
    return None
