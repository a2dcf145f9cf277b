"""Tests for request signing."""

import hashlib
import hmac
from unittest.mock import patch

from tabdeal.encoding import canonical_string
from tabdeal.signing import current_timestamp_ms, generate_signature, sign_params


class TestSignParams:
    """Tests for the HMAC-SHA256 request signer."""

    def test_known_vector(self):
        """Test the pinned signature for a fixed secret, record and timestamp."""
        signed = sign_params({"symbol": "BTCIRT"}, "abc", 1700000000000)

        base = {k: v for k, v in signed.items() if k != "signature"}
        assert canonical_string(base) == "symbol=BTCIRT&timestamp=1700000000000"
        assert signed["signature"] == (
            "3efae866260c1028f7c58ce11d648ad2bcdde93e4d1deee8fa4389676bcb1ebb"
        )

    def test_appends_timestamp_then_signature(self):
        """Test that timestamp and signature are appended last, in that order."""
        signed = sign_params({"symbol": "BTCIRT", "side": "BUY"}, "secret", 123)
        assert list(signed) == ["symbol", "side", "timestamp", "signature"]
        assert signed["timestamp"] == 123

    def test_self_consistent(self):
        """Test that re-signing the signer's own canonical string matches."""
        record = {"symbol": "ETHUSDT", "quantity": 0.25, "price": 1e-05}
        signed = sign_params(record, "s3cret", 1700000000999)

        message = canonical_string({k: v for k, v in signed.items() if k != "signature"})
        expected = hmac.new(b"s3cret", message.encode(), hashlib.sha256).hexdigest()
        assert signed["signature"] == expected

    def test_existing_timestamp_and_signature_replaced(self):
        """Test that the output carries exactly one timestamp and one signature."""
        record = {"timestamp": 1, "symbol": "BTCIRT", "signature": "stale"}
        signed = sign_params(record, "abc", 1700000000000)

        assert list(signed) == ["symbol", "timestamp", "signature"]
        assert signed == sign_params({"symbol": "BTCIRT"}, "abc", 1700000000000)

    def test_input_not_mutated(self):
        record = {"symbol": "BTCIRT"}
        sign_params(record, "abc", 1)
        assert record == {"symbol": "BTCIRT"}

    def test_empty_record(self):
        """Test signing with no fields signs the timestamp alone."""
        signed = sign_params({}, "abc", 42)
        assert signed["signature"] == generate_signature("abc", "timestamp=42")

    def test_different_timestamps_differ(self):
        first = sign_params({"symbol": "BTCIRT"}, "abc", 1)
        second = sign_params({"symbol": "BTCIRT"}, "abc", 2)
        assert first["signature"] != second["signature"]


class TestTimestamp:
    """Tests for the millisecond clock."""

    def test_milliseconds(self):
        with patch("tabdeal.signing.time.time", return_value=1700000000.1234):
            assert current_timestamp_ms() == 1700000000123
