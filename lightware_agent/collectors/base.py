"""Base collector abstract class."""

from abc import ABC, abstractmethod
from typing import Any
import logging
from functools import wraps

from ..services.accumulator import Accumulator


class BaseCollector(ABC):
    """Abstract base class for all collectors."""

    def __init__(self, config: Any, logger: logging.Logger):
        """
        Initialize base collector.

        Args:
            config: Collector-specific configuration
            logger: Logger instance
        """
        self.config = config
        self.logger = logger.getChild(self.__class__.__name__)

    @abstractmethod
    async def collect(self, acc: Accumulator) -> None:
        """
        Run one collection cycle and hand results to the accumulator.

        Args:
            acc: Sink receiving one record per collected target

        Raises:
            Exception: Any collection errors (will be caught by safe_collect)

        Note:
            Implementations should use @safe_collect decorator for error handling.
        """
        pass


def safe_collect(func):
    """
    Decorator to handle collector exceptions gracefully.

    An unexpected failure is logged with its traceback and reported to the
    accumulator instead of propagating to the scheduler.

    Args:
        func: Collector method to wrap

    Returns:
        Wrapped function that catches exceptions
    """
    @wraps(func)
    async def wrapper(self, acc, *args, **kwargs):
        try:
            return await func(self, acc, *args, **kwargs)
        except Exception as e:
            self.logger.error(f"Collection failed: {e}", exc_info=True)
            acc.add_error(e)
            return None
    return wrapper
