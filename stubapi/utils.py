"""Request parsing helpers and the API error kinds."""

from __future__ import annotations

import json
import re
from typing import Any

from flask import Response, jsonify, request

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ApiError(Exception):
    """Client error surfaced as ``{"error": message}``."""

    message = "bad request"
    status_code = 400

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidPathParameter(ApiError):
    """The ``{id}`` path segment is not an integer."""

    message = "invalid id"


class InvalidRequestBody(ApiError):
    """The request body could not be decoded into the expected record."""

    message = "invalid json"


def parse_id(raw: str) -> int:
    """Parse a path id as a signed 64-bit decimal integer."""
    if not _INT_PATTERN.fullmatch(raw):
        raise InvalidPathParameter()
    value = int(raw)
    if not INT64_MIN <= value <= INT64_MAX:
        raise InvalidPathParameter()
    return value


# JSON insignificant whitespace.
_JSON_WHITESPACE = " \t\n\r"


def _reject_constant(name: str):
    raise ValueError(f"invalid JSON constant {name}")


_DECODER = json.JSONDecoder(parse_constant=_reject_constant)


def read_json_object() -> dict[str, Any]:
    """
    Decode the first JSON value of the current request body as an object.

    The Content-Type header is not consulted and anything after the first
    value is ignored. A JSON ``null`` body decodes to an empty object; any
    other non-object value is rejected, as are ``NaN`` and ``Infinity``.
    """
    raw = request.get_data(cache=True)
    try:
        text = raw.decode("utf-8").lstrip(_JSON_WHITESPACE)
        payload, _end = _DECODER.raw_decode(text)
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise InvalidRequestBody() from exc

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise InvalidRequestBody()
    return payload


def json_error(message: str, status: int) -> tuple[Response, int]:
    """Build the standard error body."""
    return jsonify({"error": message}), status


def no_content() -> Response:
    """Build a 204 response with neither a body nor a Content-Type."""
    response = Response(status=204)
    del response.headers["Content-Type"]
    return response
