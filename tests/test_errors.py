"""Tests for error classification."""

import pytest

from tabdeal.errors import (
    APIError,
    PARSING_RESPONSE,
    TabdealError,
    TransportError,
    _render_json,
    classify_error,
)


class TestClassifyError:
    """Tests for turning error responses into APIError."""

    def test_documented_fields_and_extras(self):
        """Test that known fields are parsed and extra keys are captured."""
        err = classify_error(400, b'{"code":-1100,"msg":"bad param","extra":"x"}')

        assert isinstance(err, APIError)
        assert err.status_code == 400
        assert err.code == -1100
        assert err.message == "bad param"
        assert err.msg == "bad param"
        assert err.fields["extra"] == ["x"]
        assert err.fields["code"] == ["-1100"]
        assert err.fields["msg"] == ["bad param"]

    def test_empty_body_fallback_message(self):
        """Test that an empty body still produces a message with the status."""
        err = classify_error(500, b"")

        assert err.message
        assert "500" in err.message
        assert err.fields == {}
        assert err.code is None

    def test_non_json_body(self):
        """Test that an HTML error page is tolerated."""
        err = classify_error(502, b"<html>Bad Gateway</html>")
        assert err.message == "Tabdeal API error (502)"
        assert err.fields == {}

    def test_non_object_json(self):
        """Test that a JSON array body yields no fields."""
        err = classify_error(400, b'["a", "b"]')
        assert err.fields == {}
        assert "400" in err.message

    def test_detail_only(self):
        """Test a body with detail but no msg."""
        err = classify_error(401, b'{"detail": "Invalid API key"}')
        assert err.detail == "Invalid API key"
        assert err.fields["detail"] == ["Invalid API key"]
        assert err.message == "Tabdeal API error (401)"

    def test_list_values_rendered_per_element(self):
        """Test that arrays become one string per element."""
        err = classify_error(400, b'{"symbol": ["This field is required.", 3, true, null]}')
        assert err.fields["symbol"] == ["This field is required.", "3", "true", "null"]

    def test_other_values_rendered_as_text(self):
        """Test numbers, booleans, null and nested objects."""
        body = b'{"retry": false, "limit": 1.5, "ban": null, "meta": {"a": 1}}'
        err = classify_error(429, body)
        assert err.fields["retry"] == ["false"]
        assert err.fields["limit"] == ["1.5"]
        assert err.fields["ban"] == ["null"]
        assert err.fields["meta"] == ['{"a":1}']

    def test_zero_code_ignored(self):
        """Test that a default code is not treated as a real one."""
        err = classify_error(400, b'{"code": 0, "msg": "nope"}')
        assert err.code is None
        assert err.fields["code"] == ["0"]

    def test_string_code(self):
        """Test that short string codes are kept."""
        err = classify_error(400, b'{"code": "INVALID_SYMBOL", "msg": "unknown market"}')
        assert err.code == "INVALID_SYMBOL"
        assert err.fields["code"] == ["INVALID_SYMBOL"]

    def test_wrong_typed_msg_falls_back(self):
        """Test that a non-string msg is captured but not used as message."""
        err = classify_error(400, b'{"msg": 123}')
        assert err.fields["msg"] == ["123"]
        assert err.message == "Tabdeal API error (400)"

    def test_string_body(self):
        err = classify_error(403, '{"msg": "forbidden"}')
        assert err.message == "forbidden"

    def test_invalid_utf8_does_not_raise(self):
        err = classify_error(500, b"\xff\xfe{")
        assert "500" in err.message

    def test_deeply_nested_body_does_not_raise(self):
        """Test that bodies too deep to parse get the fallback message."""
        body = b'{"x": ' + b"[" * 100000 + b"]" * 100000 + b"}"
        err = classify_error(500, body)
        assert isinstance(err, APIError)
        assert err.message == "Tabdeal API error (500)"
        assert err.fields == {}

    def test_unrenderable_nested_value(self):
        """Test that a value too deep to re-serialize is rendered as a marker."""
        nested = []
        for _ in range(100000):
            nested = [nested]
        assert _render_json({"deep": nested}) == "..."

    @pytest.mark.parametrize(
        "status, client, server",
        [(400, True, False), (404, True, False), (500, False, True), (503, False, True)],
    )
    def test_status_helpers(self, status, client, server):
        err = classify_error(status, b"")
        assert err.is_client_error is client
        assert err.is_server_error is server


class TestErrorTypes:
    """Tests for error hierarchy and rendering."""

    def test_api_error_is_tabdeal_error(self):
        assert isinstance(classify_error(400, b""), TabdealError)

    def test_str_includes_cause(self):
        cause = ValueError("boom")
        err = TransportError("failed to unmarshal response", operation=PARSING_RESPONSE, cause=cause)
        assert str(err) == "failed to unmarshal response: boom"
        assert err.operation == "parsing response"
        assert err.cause is cause

    def test_str_without_cause(self):
        assert str(TabdealError("api key is empty")) == "api key is empty"
