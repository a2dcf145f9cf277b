"""Parameter records and their query-string encoding."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Mapping, Protocol
from urllib.parse import quote

from .errors import EncodingError

# (wire name, value, omit when empty)
ParamField = tuple[str, Any, bool]


class SupportsParams(Protocol):
    """Anything that can list its request parameters in wire order."""

    def param_fields(self) -> Iterable[ParamField]:
        ...


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, (str, bool, int, float, Decimal)):
        return not value
    return False


def param_record(params: SupportsParams | Mapping[str, Any] | None) -> dict[str, Any]:
    """Build the ordered parameter record for a request.

    Parameter objects contribute their ``param_fields()`` with empty
    omit-when-empty fields dropped. Mappings are taken as-is.
    """
    if params is None:
        return {}

    if isinstance(params, Mapping):
        return dict(params)

    if not hasattr(params, "param_fields"):
        raise EncodingError(f"cannot build parameters from {type(params).__name__}")

    record: dict[str, Any] = {}
    for name, value, omit_empty in params.param_fields():
        if omit_empty and _is_empty(value):
            continue
        record[name] = value
    return record


def render_value(value: Any) -> str:
    """Render a scalar in the text form the server expects.

    Raises:
        EncodingError: If the value is not a scalar
    """
    if isinstance(value, Enum):
        value = value.value

    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        # repr gives the shortest round-trip digits; "f" keeps it out of exponent form
        return format(Decimal(repr(value)), "f")
    if isinstance(value, Decimal):
        return format(value, "f")

    raise EncodingError(f"cannot render {type(value).__name__} value as a parameter: {value!r}")


def _pairs(record: Mapping[str, Any]) -> list[tuple[str, str]]:
    pairs = []
    for key, value in record.items():
        if not isinstance(key, str):
            raise EncodingError(f"parameter name must be a string, got {type(key).__name__}: {key!r}")
        try:
            pairs.append((key, render_value(value)))
        except EncodingError as exc:
            raise EncodingError(f"field {key!r}", cause=exc) from exc
    return pairs


def canonical_string(record: Mapping[str, Any]) -> str:
    """Join ``key=value`` pairs with ``&`` in record order, unescaped.

    This is the exact byte string the server rebuilds to check a signature.
    """
    return "&".join(f"{key}={value}" for key, value in _pairs(record))


def encode_query(record: Mapping[str, Any]) -> str:
    """Encode a record as a URL query string, keeping record order."""
    return "&".join(
        f"{quote(key, safe='')}={quote(value, safe='')}" for key, value in _pairs(record)
    )
