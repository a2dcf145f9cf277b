"""HMAC-SHA256 request signing."""

from __future__ import annotations

import hashlib
import hmac
import time
from typing import Any, Mapping

from .encoding import canonical_string


def generate_signature(secret: str, message: str) -> str:
    """Generate a hex-encoded HMAC-SHA256 signature.

    Args:
        secret: Secret key
        message: Message to sign

    Returns:
        Hex-encoded signature
    """
    return hmac.new(secret.encode(), message.encode(), hashlib.sha256).hexdigest()


def current_timestamp_ms() -> int:
    return int(time.time() * 1000)


def sign_params(record: Mapping[str, Any], secret: str, timestamp: int) -> dict[str, Any]:
    """Return a copy of ``record`` with ``timestamp`` and ``signature`` appended.

    The signature covers the canonical string of the original fields followed
    by the timestamp, in that order.

    Args:
        record: Ordered request parameters
        secret: API secret used as the MAC key
        timestamp: Unix time in milliseconds

    Returns:
        New ordered record ending with timestamp and signature
    """
    signed = {k: v for k, v in record.items() if k not in ("timestamp", "signature")}
    signed["timestamp"] = int(timestamp)
    signed["signature"] = generate_signature(secret, canonical_string(signed))
    return signed
