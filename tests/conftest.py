"""Shared pytest configuration and fixtures."""

import asyncio
import logging

import httpx
import pytest

from lightware_agent.config.models import DeviceConfig, LightwareConfig, PathConfig
from lightware_agent.services.accumulator import MemoryAccumulator
from lightware_agent.utils.logger import setup_logger


# Identity endpoints answered by a healthy device
IDENTITY = {
    "/api/ProductName": "MX2-8x8-HDMI20",
    "/api/V1/MANAGEMENT/UID/MACADDRESS/Main": "a8:d2:36:00:12:34",
    "/api/V1/MANAGEMENT/LABEL/DeviceLabel": "Boardroom Matrix",
}


class FakeDevices:
    """
    httpx.MockTransport handler emulating one or more Lightware devices.

    Routes are keyed by host, then by request path. A route value is either a
    response body (200 OK) or an int status code. Unknown paths answer 404.
    """

    def __init__(self):
        self.routes = {}
        self.delays = {}
        self.requests = []

    def add(self, host, routes=None, identity=True, delay=0.0):
        table = dict(IDENTITY) if identity else {}
        table.update(routes or {})
        self.routes[host] = table
        self.delays[host] = delay
        return self

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        delay = self.delays.get(host, 0.0)
        if delay:
            await asyncio.sleep(delay)

        route = self.routes.get(host, {}).get(request.url.path)
        if route is None:
            return httpx.Response(404, text="Not Found")
        if isinstance(route, int):
            return httpx.Response(route)
        return httpx.Response(200, content=route.encode("utf-8"))

    def paths(self, host=None):
        return [r.url.path for r in self.requests if host is None or r.url.host == host]

    def transport(self):
        return httpx.MockTransport(self)


@pytest.fixture
def logger():
    """Create logger for tests."""
    return setup_logger("test")


@pytest.fixture
def plain_logger():
    """Logger that propagates to the root logger so caplog sees it."""
    return logging.getLogger("lightware_test")


@pytest.fixture
def devices():
    """Empty fake device network."""
    return FakeDevices()


@pytest.fixture
def acc():
    """In-memory accumulator."""
    return MemoryAccumulator()


@pytest.fixture
def make_config():
    """Build a LightwareConfig from urls and path specs."""
    def _make(urls, paths=(), timeout=0.0, tags=None):
        return LightwareConfig(
            devices=[DeviceConfig(url=url, tags=dict(tags or {})) for url in urls],
            paths=[p if isinstance(p, PathConfig) else PathConfig(**p) for p in paths],
            timeout=timeout,
        )
    return _make
