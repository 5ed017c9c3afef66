"""Metric data structures for collectors."""

from dataclasses import dataclass, field
from typing import Optional, Dict, Union
import time

# Measurement name for every record produced by the Lightware collector
MEASUREMENT = "lightware"

FieldValue = Union[int, float, bool, str]


@dataclass
class Metric:
    """Single tagged metric record handed to an accumulator."""

    measurement: str
    fields: Dict[str, FieldValue]
    tags: Dict[str, str] = field(default_factory=dict)
    timestamp: Optional[float] = None

    def __post_init__(self):
        """Set timestamp if not provided."""
        if self.timestamp is None:
            self.timestamp = time.time()

    @property
    def result_code(self) -> Optional[int]:
        return self.fields.get("result_code")
