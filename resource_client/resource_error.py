from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .data import ResponseData, has_payload
from .diagnostics import DiagnosticError
from .status_phrases import PhraseLookup, display_phrase, reason_phrase
from .time_utils import utcnow

FALLBACK_USER_MESSAGE = "Request failed"

ErrorInput = DiagnosticError | BaseException | None


def _as_diagnostic(error: ErrorInput) -> DiagnosticError | None:
    if error is None or isinstance(error, DiagnosticError):
        return error
    return DiagnosticError.from_exception(error)


@dataclass(frozen=True)
class ResourceError:
    """Information about a failed resource request.

    Failures can come from many places: client-side parsing, network
    connectivity, transport security (certificate problems), server status
    codes, and validation of a payload that arrived intact. All of them are
    presented in this one shape. The diagnostic fields are optional and can be
    used to intercept specific known failures; the one guarantee is that
    ``user_message`` is always present and safe to show as-is.

    Build instances with :meth:`from_response`, :meth:`from_message` or
    :meth:`from_debug_message`.
    """

    user_message: str
    http_status_code: int | None = None
    data: ResponseData | None = None
    underlying_error: DiagnosticError | None = None
    timestamp: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if not self.user_message:
            object.__setattr__(self, "user_message", FALLBACK_USER_MESSAGE)

    @classmethod
    def from_response(
        cls,
        response: Any,
        payload: Any,
        error: ErrorInput,
        user_message: str | None = None,
        *,
        phrase_lookup: PhraseLookup = reason_phrase,
    ) -> ResourceError:
        """Build an error from a network response.

        Without an explicit ``user_message`` the message comes from the
        underlying error's description, then from the response's status
        code, then from a generic failure message.
        """
        status_code = getattr(response, "status_code", None) if response is not None else None
        diagnostic = _as_diagnostic(error)

        data = None
        if has_payload(payload):
            data = ResponseData.from_response(response, payload)

        message = None
        if user_message:
            message = user_message
        elif diagnostic is not None and diagnostic.description:
            message = diagnostic.description
        elif status_code is not None:
            message = display_phrase(status_code, phrase_lookup) or None

        if message is None:
            # No input carried a usable message.
            message = FALLBACK_USER_MESSAGE

        return cls(
            user_message=message,
            http_status_code=status_code,
            data=data,
            underlying_error=diagnostic,
        )

    @classmethod
    def from_message(
        cls,
        user_message: str,
        error: ErrorInput = None,
        data: ResponseData | None = None,
    ) -> ResourceError:
        return cls(user_message=user_message, data=data, underlying_error=_as_diagnostic(error))

    @classmethod
    def from_debug_message(
        cls,
        user_message: str,
        debug_message: str,
        data: ResponseData | None = None,
    ) -> ResourceError:
        """Build an error whose ``debug_message`` is only reachable via ``underlying_error``."""
        return cls.from_message(
            user_message,
            error=DiagnosticError.from_debug_message(debug_message),
            data=data,
        )

    def is_status(self, *status_codes: int) -> bool:
        return self.http_status_code is not None and self.http_status_code in status_codes

    @property
    def is_client_error(self) -> bool:
        return self.http_status_code is not None and 400 <= self.http_status_code < 500

    @property
    def is_server_error(self) -> bool:
        return self.http_status_code is not None and 500 <= self.http_status_code < 600
