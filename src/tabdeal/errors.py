"""Error taxonomy and error-response classification for the Tabdeal API."""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

PREPARING_REQUEST = "preparing request parameters"
CREATING_REQUEST = "creating request"
SENDING_REQUEST = "sending request"
READING_RESPONSE = "reading response"
PARSING_RESPONSE = "parsing response"


class TabdealError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, *, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class EncodingError(TabdealError):
    """A parameter value cannot be rendered as a scalar."""


class AuthenticationError(TabdealError):
    """Authenticated call attempted without a usable key/secret pair."""


class TransportError(TabdealError):
    """The request could not be prepared, sent, read or decoded."""

    def __init__(self, message: str, *, operation: str, cause: BaseException | None = None):
        super().__init__(message, cause=cause)
        self.operation = operation

    def __repr__(self) -> str:
        return f"TransportError(operation={self.operation!r}, message={self.message!r})"


class APIError(TabdealError):
    """Error response returned by Tabdeal's REST API.

    Tabdeal does not use one error schema for every endpoint. Most payloads
    carry ``code``, ``msg`` and ``detail``, but some add undocumented keys.
    Every key seen in the body is kept in ``fields``.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        code: int | str | None = None,
        msg: str = "",
        detail: str = "",
        fields: dict[str, list[str]] | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.msg = msg
        self.detail = detail
        self.fields = fields if fields is not None else {}

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    def __repr__(self) -> str:
        return (
            f"APIError(status_code={self.status_code}, code={self.code!r}, "
            f"message={self.message!r})"
        )


def _render_json(value: Any) -> str:
    """Render one decoded JSON value as text."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return str(value)
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (ValueError, RecursionError):
        return "..."


def classify_error(status_code: int, body: bytes | str | None) -> APIError:
    """Build an APIError from a non-2xx response.

    Documented fields (code, msg, detail) are read first, then every key of
    the body is captured in ``fields``. A body that is not a JSON object only
    yields the status-code fallback message. Never raises.
    """
    code: int | str | None = None
    msg = ""
    detail = ""
    fields: dict[str, list[str]] = {}

    if isinstance(body, bytes):
        text = body.decode("utf-8", errors="replace")
    else:
        text = body or ""

    try:
        raw = json.loads(text) if text.strip() else None
    except (ValueError, RecursionError):
        logger.debug("error body is not valid JSON (status=%s)", status_code)
        raw = None

    if isinstance(raw, dict):
        # Known shape
        known_code = raw.get("code")
        if isinstance(known_code, int) and not isinstance(known_code, bool):
            if known_code != 0:
                code = known_code
        elif isinstance(known_code, str) and known_code:
            code = known_code
        if code is not None:
            fields["code"] = [str(code)]

        known_msg = raw.get("msg")
        if isinstance(known_msg, str) and known_msg:
            msg = known_msg
            fields["msg"] = [known_msg]

        known_detail = raw.get("detail")
        if isinstance(known_detail, str) and known_detail:
            detail = known_detail
            fields["detail"] = [known_detail]

        # Every key, typed or not
        for key, value in raw.items():
            if isinstance(value, str):
                fields[key] = [value]
                if key == "msg" and not msg:
                    msg = value
                if key == "detail" and not detail:
                    detail = value
            elif isinstance(value, list):
                fields[key] = [_render_json(item) for item in value]
            else:
                fields[key] = [_render_json(value)]

    message = msg or f"Tabdeal API error ({status_code})"
    return APIError(
        status_code,
        message,
        code=code,
        msg=msg,
        detail=detail,
        fields=fields,
    )
