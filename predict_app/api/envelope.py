"""
Response envelope handling.

Every endpoint answers ``{"success": bool, "data"?: ..., "error"?: str}``.
"""

from typing import Any

import orjson

from ..errors import ApiResponseError, HttpStatusError, MalformedResponseError
from .transport import HttpResponse

UNKNOWN_SERVER_ERROR = "Unknown error"


def encode_json(payload: dict[str, Any]) -> bytes:
    """Serialize a request body."""
    return orjson.dumps(payload)


def decode_json(raw: bytes) -> Any:
    """
    Parse a raw JSON body.

    Raises:
        MalformedResponseError: If the body is not valid JSON
    """
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise MalformedResponseError(
            f"Invalid JSON: {e}",
            raw_data=raw[:200].decode("utf-8", errors="replace"),
            expected_format="json"
        ) from e


def unwrap(response: HttpResponse) -> Any:
    """
    Validate an envelope and return its ``data`` member.

    Raises:
        ApiResponseError: If the envelope reports ``success: false``
        HttpStatusError: If the status is non-2xx and the body is no envelope
        MalformedResponseError: If a 2xx body is not a valid envelope
    """
    try:
        payload = decode_json(response.body)
    except MalformedResponseError:
        if not response.ok:
            raise HttpStatusError(
                f"HTTP {response.status_code}",
                status_code=response.status_code
            ) from None
        raise

    if not isinstance(payload, dict) or not isinstance(payload.get("success"), bool):
        if not response.ok:
            raise HttpStatusError(
                f"HTTP {response.status_code}",
                status_code=response.status_code
            )
        raise MalformedResponseError(
            "Response is not a success envelope",
            expected_format="envelope"
        )

    if not payload["success"]:
        server_error = payload.get("error") or UNKNOWN_SERVER_ERROR
        raise ApiResponseError(
            str(server_error),
            server_error=str(server_error),
            status_code=response.status_code
        )

    if not response.ok:
        raise HttpStatusError(
            f"HTTP {response.status_code}",
            status_code=response.status_code
        )

    return payload.get("data")
