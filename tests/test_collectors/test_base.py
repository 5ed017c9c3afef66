"""Tests for BaseCollector class."""

import logging
import pytest

from lightware_agent.collectors.base import BaseCollector, safe_collect
from lightware_agent.services.accumulator import MemoryAccumulator
from lightware_agent.utils.metrics import MEASUREMENT


class MockCollector(BaseCollector):
    """Mock collector for testing BaseCollector functionality."""

    def __init__(self, config=None, logger=None, fail=False):
        if logger is None:
            logger = logging.getLogger(__name__)
        super().__init__(config or [], logger)
        self.fail = fail

    @safe_collect
    async def collect(self, acc):
        """Emit one record per configured host, or crash."""
        if self.fail:
            raise RuntimeError("device table corrupted")
        for host in self.config:
            acc.add_fields(MEASUREMENT, {"result_code": 0}, {"host": host})
        return len(self.config)


class TestBaseCollector:
    """Test suite for BaseCollector."""

    def test_child_logger_named_after_class(self):
        collector = MockCollector(logger=logging.getLogger("agent"))
        assert collector.logger.name == "agent.MockCollector"

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            BaseCollector([], logging.getLogger(__name__))

    @pytest.mark.asyncio
    async def test_safe_collect_passes_through(self):
        acc = MemoryAccumulator()
        collector = MockCollector(config=["a.local", "b.local"])

        result = await collector.collect(acc)

        assert result == 2
        assert [m.tags["host"] for m in acc.metrics] == ["a.local", "b.local"]
        assert acc.errors == []

    @pytest.mark.asyncio
    async def test_safe_collect_reports_exception(self, caplog):
        acc = MemoryAccumulator()
        collector = MockCollector(config=["a.local"], fail=True)

        with caplog.at_level(logging.ERROR):
            result = await collector.collect(acc)

        assert result is None
        assert acc.metrics == []
        assert len(acc.errors) == 1
        assert isinstance(acc.errors[0], RuntimeError)
        assert "Collection failed: device table corrupted" in caplog.text

    def test_safe_collect_preserves_metadata(self):
        assert MockCollector.collect.__name__ == "collect"
        assert "Emit one record" in MockCollector.collect.__doc__
