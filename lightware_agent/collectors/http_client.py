"""HTTP client for querying Lightware device endpoints."""

import asyncio
import logging
from typing import Optional

import httpx

from .errors import (
    BodyReadError,
    NonOKStatusError,
    RequestBuildError,
    TransportError,
)

# Used when the fetcher is built without an explicit timeout
DEFAULT_REQUEST_TIMEOUT_S = 10.0
MAX_REDIRECTS = 10


class DeviceHTTPClient:
    """
    Shared async HTTP client for one collection cycle.

    Certificate verification is disabled: Lightware devices ship with
    self-signed certificates. Use as an async context manager so the
    connection pool is closed when the cycle ends.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize device HTTP client.

        Args:
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
            logger: Optional logger instance
        """
        self.timeout = timeout or DEFAULT_REQUEST_TIMEOUT_S
        self.logger = logger or logging.getLogger(__name__)
        self._client = httpx.AsyncClient(
            verify=False,
            timeout=self.timeout,
            transport=transport,
            follow_redirects=True,
            max_redirects=MAX_REDIRECTS
        )

    async def __aenter__(self) -> "DeviceHTTPClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def get(self, url: httpx.URL) -> bytes:
        """
        GET a device endpoint and return the raw body.

        Redirects are followed. Basic-auth credentials embedded in the URL
        userinfo are moved into an Authorization header. The timeout bounds
        the whole request, body included, not just each network phase.

        Args:
            url: Fully formed request target

        Returns:
            bytes: Raw response body

        Raises:
            RequestBuildError: Request could not be constructed
            TransportError: Network call failed
            NonOKStatusError: Status code other than 200
            BodyReadError: Body could not be fully read
        """
        try:
            return await asyncio.wait_for(self._get(url), self.timeout)
        except asyncio.TimeoutError as e:
            raise TransportError(f"response: timed out after {self.timeout}s") from e

    async def _get(self, url: httpx.URL) -> bytes:
        try:
            auth = None
            if url.username or url.password:
                auth = httpx.BasicAuth(url.username, url.password)
                url = url.copy_with(username=None, password=None)
            request = self._client.build_request("GET", url)
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            raise RequestBuildError(f"request: {e}") from e

        try:
            response = await self._client.send(request, auth=auth, stream=True)
        except httpx.HTTPError as e:
            raise TransportError(f"response: {e}") from e

        try:
            if response.status_code != httpx.codes.OK:
                raise NonOKStatusError(response.status_code)

            try:
                return await response.aread()
            except httpx.HTTPError as e:
                raise BodyReadError(f"read body: {e}") from e
        finally:
            await response.aclose()
