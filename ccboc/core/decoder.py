"""Envelope decoding of successful response bodies into typed resources."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ccboc.core.errors import DecodeError
from ccboc.core.resources import MODELS, BulkFile, Resource, ResourceKind, StatusReply

DATA_KEY = "data"


class Envelope(str, Enum):
    """How a resource is placed inside a response body.

    Chosen by the caller for each endpoint, never guessed from the payload.
    """

    WRAPPED = "wrapped"  # {"data": <resource>}
    DIRECT = "direct"  # <resource>


def _load_json(body: bytes | str) -> Any:
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"Error unmarshaling json response: {e}") from e


def unwrap(body: bytes | str, shape: Envelope) -> Any:
    """Return the resource payload of a body for the given envelope shape."""
    payload = _load_json(body)
    if shape is Envelope.DIRECT:
        return payload
    if not isinstance(payload, dict) or DATA_KEY not in payload:
        raise DecodeError(f"Response has no '{DATA_KEY}' field", details={"body": _preview(body)})
    return payload[DATA_KEY]


def decode(body: bytes | str, kind: ResourceKind, shape: Envelope) -> Resource:
    """Decode a response body into the resource declared by `kind`.

    Raises:
        DecodeError: On invalid JSON, a missing envelope, or a shape mismatch.
    """
    payload = unwrap(body, shape)
    model = MODELS[kind]
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise DecodeError(
            f"Response does not match {kind.value}",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


def decode_status(body: bytes | str) -> StatusReply:
    """Decode the `{"status_code": ..., "message": ...}` reply of delete endpoints."""
    try:
        return StatusReply.model_validate(_load_json(body))
    except PydanticValidationError as e:
        raise DecodeError(
            "Response is not a status reply",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


def decode_bulk_file(body: bytes | str) -> BulkFile:
    """Check a bulk file before it is submitted.

    Names are optional here; every member still needs teff and logG.
    """
    try:
        return BulkFile.model_validate(_load_json(body))
    except PydanticValidationError as e:
        raise DecodeError(
            "File is not a calculation bulk",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


def _preview(body: bytes | str, limit: int = 200) -> str:
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    return text[:limit]
