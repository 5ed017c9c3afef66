"""Metric sinks that receive collection results."""

from abc import ABC, abstractmethod
import logging
from typing import Dict, List, Optional

from ..utils.metrics import FieldValue, Metric


class Accumulator(ABC):
    """
    Receives metric records and errors from collectors.

    Collectors call ``add_fields`` as soon as a device finishes, possibly
    from several concurrent tasks, so implementations must not assume any
    ordering across devices.
    """

    @abstractmethod
    def add_fields(
        self,
        measurement: str,
        fields: Dict[str, FieldValue],
        tags: Optional[Dict[str, str]] = None
    ) -> None:
        """
        Record one metric.

        Args:
            measurement: Measurement name
            fields: Field name to typed value
            tags: Tag name to value
        """
        pass

    @abstractmethod
    def add_error(self, error: Exception) -> None:
        """Record a collection failure that produced no metric."""
        pass

    @property
    @abstractmethod
    def error_count(self) -> int:
        """Number of errors recorded so far."""
        pass


class MemoryAccumulator(Accumulator):
    """Keeps every record in memory, in arrival order."""

    def __init__(self):
        self.metrics: List[Metric] = []
        self.errors: List[Exception] = []

    def add_fields(self, measurement, fields, tags=None) -> None:
        self.metrics.append(Metric(measurement, dict(fields), dict(tags or {})))

    def add_error(self, error: Exception) -> None:
        self.errors.append(error)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def clear(self) -> None:
        self.metrics = []
        self.errors = []


class LoggingAccumulator(Accumulator):
    """Writes each record as a structured log line."""

    def __init__(self, logger: logging.Logger):
        """
        Initialize logging accumulator.

        Args:
            logger: Logger instance (JSON formatted by setup_logger)
        """
        self.logger = logger.getChild(self.__class__.__name__)
        self.count = 0
        self._error_count = 0

    def add_fields(self, measurement, fields, tags=None) -> None:
        metric = Metric(measurement, dict(fields), dict(tags or {}))
        self.count += 1
        self.logger.info(
            f"{metric.measurement} {metric.tags.get('host', '')}",
            extra={
                "measurement": metric.measurement,
                "fields": metric.fields,
                "tags": metric.tags,
                "metric_timestamp": metric.timestamp
            }
        )

    def add_error(self, error: Exception) -> None:
        self._error_count += 1
        self.logger.error(f"Collection error: {error}")

    @property
    def error_count(self) -> int:
        return self._error_count
