from __future__ import annotations

from pydantic import BaseModel

from .errors import ERROR_DOMAIN, StatusClientError, code_for_numeric
from .resource_error import ResourceError
from .time_utils import to_iso


class ErrorPayload(BaseModel):
    code: str
    message: str
    status_code: int | None = None
    timestamp: str
    debug: str | None = None


def _error_code(error: ResourceError) -> str:
    diagnostic = error.underlying_error
    if diagnostic is not None and diagnostic.domain == ERROR_DOMAIN:
        return code_for_numeric(diagnostic.code)
    if error.http_status_code is not None:
        return StatusClientError.code
    return code_for_numeric(0)


def error_to_payload(error: ResourceError) -> ErrorPayload:
    diagnostic = error.underlying_error
    return ErrorPayload(
        code=_error_code(error),
        message=error.user_message,
        status_code=error.http_status_code,
        timestamp=to_iso(error.timestamp),
        debug=diagnostic.description if diagnostic is not None else None,
    )
