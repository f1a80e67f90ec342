from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any

from .time_utils import utcnow

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def has_payload(payload: Any) -> bool:
    if payload is None:
        return False
    if isinstance(payload, (bytes, bytearray, str)):
        return len(payload) > 0
    return True


def _parse_content_type(raw: str | None) -> tuple[str, str | None]:
    if not raw:
        return DEFAULT_CONTENT_TYPE, None

    media_type, _, params = raw.partition(";")
    charset = None
    for param in params.split(";"):
        key, _, value = param.strip().partition("=")
        if key.lower() == "charset" and value:
            charset = value.strip().strip('"').lower()
    return media_type.strip().lower() or DEFAULT_CONTENT_TYPE, charset


@dataclass(frozen=True)
class ResponseData:
    """A response payload paired with the metadata it arrived with."""

    payload: Any
    content_type: str = DEFAULT_CONTENT_TYPE
    charset: str | None = None
    etag: str | None = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    timestamp: datetime = field(default_factory=utcnow)

    @classmethod
    def from_response(cls, response: Any, payload: Any) -> ResponseData | None:
        """Wrap ``payload`` with ``response`` metadata, or ``None`` without a response."""
        if response is None:
            return None

        raw_headers = getattr(response, "headers", None) or {}
        headers = {str(key).lower(): str(value) for key, value in raw_headers.items()}
        content_type, charset = _parse_content_type(headers.get("content-type"))

        return cls(
            payload=bytes(payload) if isinstance(payload, bytearray) else payload,
            content_type=content_type,
            charset=charset,
            etag=headers.get("etag"),
            headers=MappingProxyType(headers),
        )

    @property
    def text(self) -> str | None:
        if isinstance(self.payload, str):
            return self.payload
        if isinstance(self.payload, bytes):
            try:
                return self.payload.decode(self.charset or "utf-8", errors="replace")
            except LookupError:
                # Unknown charset label from the server.
                return self.payload.decode("utf-8", errors="replace")
        return None
