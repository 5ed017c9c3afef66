"""Lightware matrix switcher collector."""

import asyncio
import logging
import posixpath
from pathlib import Path
from typing import Optional

import httpx

from ..config.models import DeviceConfig, LightwareConfig
from ..services.accumulator import Accumulator
from ..utils.metrics import MEASUREMENT, Metric
from ..utils.status import ResultCode
from .base import BaseCollector, safe_collect
from .errors import FetchError, ParseError, UrlParseError
from .http_client import DeviceHTTPClient
from .parsers import decode_body, parse_value

API_PREFIX = "/api"
SAMPLE_CONFIG_PATH = Path(__file__).parent.parent / "config" / "sample_config.yaml"

# Identity tags resolved before any configured path, in this order
IDENTITY_PATHS = (
    ("product", "/api/ProductName"),
    # Ethernet 1 (Main) is the control/management port
    ("mac", "/api/V1/MANAGEMENT/UID/MACADDRESS/Main"),
    ("label", "/api/V1/MANAGEMENT/LABEL/DeviceLabel"),
)


def parse_device_url(raw: str) -> httpx.URL:
    """
    Parse a device base URL.

    Raises:
        UrlParseError: URL is malformed, is not http(s) or has no host
    """
    try:
        url = httpx.URL(raw)
    except (httpx.InvalidURL, TypeError) as e:
        raise UrlParseError(str(e)) from e
    if url.scheme not in ("http", "https"):
        raise UrlParseError(f"unsupported scheme {url.scheme!r}, expected http or https")
    if not url.host:
        raise UrlParseError("missing host")
    return url


def resolve_endpoint(path: str) -> str:
    """
    Map a configured path onto the device API.

    The device's advanced view shows paths both with and without the
    ``/api`` prefix, so ``V1/X``, ``/V1/X`` and ``/api/V1/X`` all resolve to
    ``/api/V1/X``.
    """
    if path == API_PREFIX or path.startswith(API_PREFIX + "/"):
        path = path[len(API_PREFIX):]
    return posixpath.normpath(API_PREFIX + "/" + path.lstrip("/"))


def display_url(url: httpx.URL) -> str:
    """Render a URL for logs with any password masked."""
    if url.password:
        url = url.copy_with(username=url.username, password="xxxxx")
    return str(url)


class LightwareCollector(BaseCollector):
    """Collector for Lightware devices exposing the LW3 HTTP API."""

    def __init__(
        self,
        config: LightwareConfig,
        logger: logging.Logger,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize Lightware collector.

        Args:
            config: Devices, paths and request timeout
            logger: Logger instance
            transport: Optional httpx transport shared by every request
        """
        super().__init__(config, logger)
        self.transport = transport

    @staticmethod
    def description() -> str:
        return "Read metrics from Lightware devices"

    @staticmethod
    def sample_config() -> str:
        return SAMPLE_CONFIG_PATH.read_text()

    @safe_collect
    async def collect(self, acc: Accumulator) -> None:
        """
        Collect from every configured device concurrently.

        Each device's record is handed to the accumulator as soon as that
        device finishes. Returns once every device is done.

        Args:
            acc: Sink receiving one record per device
        """
        self.config.apply_defaults()

        if not self.config.devices:
            self.logger.info("No Lightware devices configured")
            return

        self.logger.info(
            f"Checking {len(self.config.devices)} device(s), "
            f"{len(self.config.paths)} path(s) each"
        )

        async with DeviceHTTPClient(
            timeout=self.config.timeout,
            transport=self.transport,
            logger=self.logger
        ) as client:
            tasks = [
                self._collect_and_emit(client, device, acc)
                for device in self.config.devices
            ]
            results = await asyncio.gather(*tasks, return_exceptions=True)

        for device, result in zip(self.config.devices, results):
            if isinstance(result, Exception):
                self.logger.error(
                    f"Device check failed for {device.url}: {result}",
                    exc_info=result
                )
                acc.add_error(result)

    async def _collect_and_emit(
        self,
        client: DeviceHTTPClient,
        device: DeviceConfig,
        acc: Accumulator
    ) -> None:
        metric = await self.collect_device(client, device)
        if metric is not None:
            acc.add_fields(metric.measurement, metric.fields, metric.tags)

    async def collect_device(
        self,
        client: DeviceHTTPClient,
        device: DeviceConfig
    ) -> Optional[Metric]:
        """
        Collect identity tags and configured paths from one device.

        Identity lookups are fatal for the cycle: the first failure returns a
        record with ``result_code`` 1 and no path fields. Path lookups are
        best effort: a failed fetch is only logged (many paths exist on some
        models only), while a value that does not parse as its declared type
        sets ``result_code`` to 1.

        Args:
            client: HTTP client shared by the cycle
            device: Device configuration

        Returns:
            Optional[Metric]: Record for the device, None if its URL is invalid
        """
        try:
            base_url = parse_device_url(device.url)
        except UrlParseError as e:
            self.logger.error(
                f"lightware {device.url!r} parse URL: {e}",
                extra={"error_type": "url-parse-error"}
            )
            return None

        tags = {"host": base_url.host}
        tags.update(device.tags)

        for tag, endpoint in IDENTITY_PATHS:
            if tag in tags:
                continue

            url = base_url.copy_with(path=endpoint)
            try:
                tags[tag] = decode_body(await client.get(url))
            except FetchError as e:
                self.logger.error(
                    f"lightware {display_url(url)!r} {tag}: {e}",
                    extra={"error_type": "identity-fetch-error", "host": tags["host"]}
                )
                return Metric(MEASUREMENT, {"result_code": int(ResultCode.FAILED)}, tags)

        result_code = ResultCode.OK
        fields = {}

        for path in self.config.paths:
            url = base_url.copy_with(path=resolve_endpoint(path.path))

            try:
                data = await client.get(url)
            except FetchError as e:
                # Some paths are only available on certain models
                self.logger.error(
                    f"lightware {display_url(url)!r} get: {e}",
                    extra={"error_type": "path-fetch-error", "host": tags["host"]}
                )
                continue

            try:
                value = parse_value(decode_body(data), path.type)
            except ParseError as e:
                self.logger.error(
                    f"lightware {display_url(url)!r} parse {path.type}: {e}",
                    extra={"error_type": "path-parse-error", "host": tags["host"]}
                )
                result_code = ResultCode.FAILED
                continue

            fields[path.field] = value

        fields["result_code"] = int(result_code)
        return Metric(MEASUREMENT, fields, tags)
