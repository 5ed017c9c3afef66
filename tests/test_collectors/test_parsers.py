"""Tests for device value parsing."""

import math
import pytest

from lightware_agent.collectors.errors import ParseError, UnknownTypeError
from lightware_agent.collectors.parsers import (
    INT64_MAX,
    INT64_MIN,
    decode_body,
    parse_boolean,
    parse_float,
    parse_integer,
    parse_value,
)
from lightware_agent.config.models import FieldType


class TestParseInteger:

    @pytest.mark.parametrize("value", [0, 7, -7, 86400, INT64_MAX, INT64_MIN])
    def test_round_trip(self, value):
        assert parse_integer(str(value)) == value

    def test_explicit_plus_sign(self):
        assert parse_integer("+3") == 3

    @pytest.mark.parametrize("text", [
        "", "abc", "1.5", "4_2", " 42", "42\n", "0x10", "--1",
        str(INT64_MAX + 1), str(INT64_MIN - 1),
    ])
    def test_malformed_rejected(self, text):
        with pytest.raises(ParseError):
            parse_integer(text)


class TestParseFloat:

    @pytest.mark.parametrize("value", [0.0, 41.5, -0.25, 1e-9, 6.02e23])
    def test_round_trip(self, value):
        assert parse_float(repr(value)) == value

    @pytest.mark.parametrize("text,expected", [
        ("12", 12.0), ("1.", 1.0), (".5", 0.5), ("1E3", 1000.0), ("-Inf", -math.inf),
    ])
    def test_accepted_forms(self, text, expected):
        assert parse_float(text) == expected

    def test_nan(self):
        assert math.isnan(parse_float("NaN"))

    @pytest.mark.parametrize("text", ["", "abc", "1_0", " 1.0", "1.0\n", "1e400", "1.2.3", "0x1p-2"])
    def test_malformed_rejected(self, text):
        with pytest.raises(ParseError):
            parse_float(text)


class TestParseBoolean:
    """Boolean parsing is permissive: unmatched input is False, never an error."""

    @pytest.mark.parametrize("text", ["true", "True", "TRUE", "1", "ok", "OK", "occupied", "Occupied"])
    def test_truthy(self, text):
        assert parse_boolean(text) is True

    @pytest.mark.parametrize("text", ["false", "0", "yes", "", "okay", " true", "true\n", "not-a-bool"])
    def test_everything_else_false(self, text):
        assert parse_boolean(text) is False

    def test_never_raises_unlike_integer(self):
        # Same garbage input: integer parse fails, boolean parse returns False
        with pytest.raises(ParseError):
            parse_value("garbage", "integer")
        assert parse_value("garbage", "boolean") is False


class TestParseValue:

    def test_string_is_identity(self):
        assert parse_value("  Boardroom\n", "string") == "  Boardroom\n"

    def test_accepts_enum_members(self):
        assert parse_value("5", FieldType.INTEGER) == 5
        assert parse_value("2.5", FieldType.FLOAT) == 2.5

    def test_unknown_type(self):
        with pytest.raises(UnknownTypeError) as exc_info:
            parse_value("5", "duration")
        assert isinstance(exc_info.value, ParseError)
        assert exc_info.value.field_type == "duration"

    def test_missing_type_is_unknown(self):
        with pytest.raises(UnknownTypeError):
            parse_value("5", None)


def test_decode_body_never_fails():
    assert decode_body(b"MX2-8x8") == "MX2-8x8"
    assert decode_body(b"ok\xff") == "ok\udcff"
    assert decode_body(b"ok\xff").encode("utf-8", "surrogateescape") == b"ok\xff"
    assert decode_body(b" padded \r\n") == " padded \r\n"
