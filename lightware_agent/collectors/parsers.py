"""Typed value parsing for raw device responses."""

import math
import re
from typing import Union

from ..config.models import FieldType
from .errors import ParseError, UnknownTypeError

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE
)
# Lightware reports signal and port states with several truthy spellings
_TRUTHY_RE = re.compile(r"true|1|ok|occupied", re.IGNORECASE)


def decode_body(data: bytes) -> str:
    """
    Decode a response body as UTF-8 without trimming anything.

    Invalid bytes are kept as lone surrogates, so
    ``text.encode("utf-8", "surrogateescape")`` gives back the original body.
    """
    return data.decode("utf-8", errors="surrogateescape")


def parse_integer(text: str) -> int:
    if not _INTEGER_RE.fullmatch(text):
        raise ParseError(f"invalid integer: {text!r}")
    value = int(text)
    if value < INT64_MIN or value > INT64_MAX:
        raise ParseError(f"integer out of range: {text!r}")
    return value


def parse_float(text: str) -> float:
    if not _FLOAT_RE.fullmatch(text):
        raise ParseError(f"invalid float: {text!r}")
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        raise ParseError(f"float out of range: {text!r}")
    return value


def parse_boolean(text: str) -> bool:
    """Permissive truthy test: anything outside the truthy set is False, never an error."""
    return _TRUTHY_RE.fullmatch(text) is not None


def parse_value(text: str, field_type: Union[FieldType, str]) -> Union[int, float, bool, str]:
    """
    Convert response text into a value of the declared type.

    Args:
        text: Response body text, untrimmed
        field_type: One of integer, float, boolean, string

    Returns:
        Parsed value whose Python type matches ``field_type``

    Raises:
        ParseError: Text is not a valid integer or float
        UnknownTypeError: ``field_type`` is not supported
    """
    try:
        field_type = FieldType(field_type)
    except ValueError:
        raise UnknownTypeError(str(field_type)) from None

    if field_type is FieldType.INTEGER:
        return parse_integer(text)
    if field_type is FieldType.FLOAT:
        return parse_float(text)
    if field_type is FieldType.BOOLEAN:
        return parse_boolean(text)
    return text
