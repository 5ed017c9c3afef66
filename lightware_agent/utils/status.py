"""Collection result code enumeration."""

from enum import IntEnum


class ResultCode(IntEnum):
    """Per-device health flag reported in the ``result_code`` field."""

    OK = 0
    FAILED = 1  # identity lookup or path parse failed
