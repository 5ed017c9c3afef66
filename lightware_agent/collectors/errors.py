"""Typed exceptions raised while collecting from Lightware devices.

Fetch errors and parse errors are separate families: a failed fetch of a
configured path is expected on models that lack the endpoint, while a parse
error means the endpoint answered with data that does not match its declared
type.
"""


class LightwareError(Exception):
    """Base exception for the Lightware collector."""


class UrlParseError(LightwareError):
    """Device URL cannot be parsed or has no host."""


class FetchError(LightwareError):
    """Fetching a device endpoint failed."""


class RequestBuildError(FetchError):
    """The HTTP request could not be constructed."""


class TransportError(FetchError):
    """Network failure, timeout or TLS error while sending the request."""


class NonOKStatusError(FetchError):
    """Device answered with a status other than 200 OK."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"status: {status_code}")


class BodyReadError(FetchError):
    """Response body could not be read to completion."""


class ParseError(LightwareError):
    """Response text does not match the declared field type."""


class UnknownTypeError(ParseError):
    """Declared field type is not one of the supported types."""

    def __init__(self, field_type: str):
        self.field_type = field_type
        super().__init__(f"unknown type: {field_type}")


class CollectionCycleError(LightwareError):
    """Collectors reported errors during a cycle."""

    def __init__(self, error_count: int):
        self.error_count = error_count
        super().__init__(f"{error_count} error(s) reported during collection cycle")
