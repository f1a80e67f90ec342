from __future__ import annotations

import dataclasses
from datetime import timezone

import httpx
import pytest

from resource_client.diagnostics import DiagnosticError
from resource_client.errors import DEBUG_ERROR_CODE, ERROR_DOMAIN, ValidationClientError
from resource_client.resource_error import FALLBACK_USER_MESSAGE, ResourceError


def test_server_error_without_payload_uses_status_phrase() -> None:
    response = httpx.Response(500)

    error = ResourceError.from_response(response, response.content, None)

    assert error.user_message == "Internal Server Error"
    assert error.http_status_code == 500
    assert error.data is None
    assert error.underlying_error is None


def test_nothing_supplied_falls_back_to_generic_message() -> None:
    error = ResourceError.from_response(None, None, None)

    assert error.user_message == FALLBACK_USER_MESSAGE == "Request failed"
    assert error.http_status_code is None
    assert error.data is None
    assert error.underlying_error is None


def test_override_message_wins_over_error_and_status() -> None:
    response = httpx.Response(404, content=b"missing")
    diagnostic = DiagnosticError(domain="test", code=7, description="Lower level failure")

    error = ResourceError.from_response(response, response.content, diagnostic, user_message="Try again later")

    assert error.user_message == "Try again later"
    assert error.http_status_code == 404
    assert error.underlying_error == diagnostic


def test_error_description_wins_over_status_phrase() -> None:
    response = httpx.Response(401)
    diagnostic = DiagnosticError(domain="auth", code=3, description="Invalid username or password")

    error = ResourceError.from_response(response, None, diagnostic)

    assert error.user_message == "Invalid username or password"


def test_empty_description_falls_through_to_status_phrase() -> None:
    response = httpx.Response(404)

    error = ResourceError.from_response(response, None, ValueError(""))

    assert error.user_message == "Not Found"
    assert error.underlying_error is not None
    assert error.underlying_error.domain == "builtins.ValueError"


def test_empty_override_counts_as_absent() -> None:
    error = ResourceError.from_response(httpx.Response(503), None, None, user_message="")

    assert error.user_message == "Service Unavailable"


def test_whitespace_override_is_used_verbatim() -> None:
    error = ResourceError.from_response(httpx.Response(503), None, None, user_message="   ")

    assert error.user_message == "   "


def test_exception_is_converted_to_diagnostic() -> None:
    failure = ValidationClientError("Name is required.")

    error = ResourceError.from_response(httpx.Response(200), b"{}", failure)

    assert error.user_message == "Name is required."
    assert error.underlying_error is not None
    assert error.underlying_error.domain == ERROR_DOMAIN
    assert error.underlying_error.code == ValidationClientError.numeric_code
    assert error.underlying_error.cause is failure


def test_injected_phrase_lookup_is_capitalized() -> None:
    error = ResourceError.from_response(httpx.Response(418), None, None, phrase_lookup=lambda code: "short and stout")

    assert error.user_message == "Short and stout"


def test_empty_phrase_from_lookup_uses_fallback() -> None:
    error = ResourceError.from_response(httpx.Response(599), None, None, phrase_lookup=lambda code: "")

    assert error.user_message == FALLBACK_USER_MESSAGE
    assert error.http_status_code == 599


def test_data_requires_response_and_non_empty_payload() -> None:
    response = httpx.Response(422, headers={"Content-Type": "application/json"})

    with_both = ResourceError.from_response(response, b'{"field": "name"}', None)
    empty_payload = ResourceError.from_response(response, b"", None)
    no_payload = ResourceError.from_response(response, None, None)
    no_response = ResourceError.from_response(None, b"orphan payload", None)

    assert with_both.data is not None
    assert with_both.data.payload == b'{"field": "name"}'
    assert with_both.data.content_type == "application/json"
    assert empty_payload.data is None
    assert no_payload.data is None
    assert no_response.data is None


def test_from_message_copies_inputs_without_status() -> None:
    diagnostic = DiagnosticError(domain="cache", code=2, description="stale entry")

    error = ResourceError.from_message("Could not load profile", error=diagnostic)

    assert error.user_message == "Could not load profile"
    assert error.underlying_error == diagnostic
    assert error.http_status_code is None
    assert error.data is None


def test_from_message_keeps_prebuilt_data() -> None:
    prebuilt = ResourceError.from_response(httpx.Response(400), b"bad", None).data

    error = ResourceError.from_message("Bad input", data=prebuilt)

    assert error.data is prebuilt
    assert error.http_status_code is None


def test_from_debug_message_hides_debug_text() -> None:
    error = ResourceError.from_debug_message("X", "Y")

    assert error.user_message == "X"
    assert "Y" not in error.user_message
    assert error.underlying_error == DiagnosticError(domain=ERROR_DOMAIN, code=DEBUG_ERROR_CODE, description="Y")


def test_empty_explicit_message_is_replaced() -> None:
    error = ResourceError.from_debug_message("", "profile payload had no id")

    assert error.user_message == FALLBACK_USER_MESSAGE
    assert error.underlying_error is not None
    assert error.underlying_error.description == "profile payload had no id"


def test_explicit_message_is_copied_verbatim() -> None:
    assert ResourceError.from_message("  Offline  ").user_message == "  Offline  "


def test_error_is_immutable_and_timestamped_once() -> None:
    error = ResourceError.from_response(httpx.Response(500), None, None)
    first_read = (error.user_message, error.http_status_code, error.timestamp)

    with pytest.raises(dataclasses.FrozenInstanceError):
        error.timestamp = error.timestamp  # type: ignore[misc]
    with pytest.raises(dataclasses.FrozenInstanceError):
        error.user_message = "changed"  # type: ignore[misc]

    assert (error.user_message, error.http_status_code, error.timestamp) == first_read
    assert error.timestamp.tzinfo == timezone.utc


def test_each_failure_gets_its_own_value() -> None:
    first = ResourceError.from_response(None, None, None)
    second = ResourceError.from_response(None, None, None)

    assert first is not second
    assert second.timestamp >= first.timestamp


def test_status_helpers() -> None:
    unauthorized = ResourceError.from_response(httpx.Response(401), None, None)
    bad_gateway = ResourceError.from_response(httpx.Response(502), None, None)
    local = ResourceError.from_message("Offline")

    assert unauthorized.is_status(401, 403)
    assert unauthorized.is_client_error
    assert not unauthorized.is_server_error
    assert bad_gateway.is_server_error
    assert not local.is_status(401)
    assert not local.is_client_error
