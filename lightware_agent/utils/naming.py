"""Default field name derivation for device paths."""

import re

# Word boundaries: acronym end (UIDMain -> UID|Main), lower/digit to upper,
# letter to digit and digit to letter.
_BOUNDARY = re.compile(
    r"(?<=[A-Z])(?=[A-Z][a-z])"
    r"|(?<=[a-z0-9])(?=[A-Z])"
    r"|(?<=[A-Za-z])(?=[0-9])"
    r"|(?<=[0-9])(?=[A-Za-z])"
)
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")


def snake_case(value: str) -> str:
    """
    Convert a device path into a snake_case field name.

    ``Input1/SignalPresent`` becomes ``input_1_signal_present`` and
    ``/V1/MANAGEMENT/UID/MACADDRESS/Main`` becomes
    ``v_1_management_uid_macaddress_main``.

    Args:
        value: Path string, any characters allowed

    Returns:
        str: Lowercase words joined by underscores (empty for empty input)
    """
    words = []
    for chunk in _SEPARATORS.split(value):
        if chunk:
            words.extend(part for part in _BOUNDARY.split(chunk) if part)
    return "_".join(word.lower() for word in words)
