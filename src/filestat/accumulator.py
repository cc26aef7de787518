"""In-memory metric accumulator.

Collects observations handed over by input plugins in arrival order. The
host runtime drains it and forwards metrics to whatever backend it owns.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class Metric:
    """A single observation recorded by an accumulator."""

    measurement: str
    fields: dict[str, Any]
    tags: dict[str, str] = field(default_factory=dict)
    timestamp: int = 0  # UTC epoch seconds


class MemoryAccumulator:
    """Accumulator that keeps every metric in a list."""

    def __init__(self) -> None:
        self.metrics: list[Metric] = []

    def add_fields(
        self,
        measurement: str,
        fields: Mapping[str, Any],
        tags: Optional[Mapping[str, str]] = None,
    ) -> None:
        metric = Metric(
            measurement=measurement,
            fields=dict(fields),
            tags=dict(tags or {}),
            timestamp=int(time.time()),
        )
        self.metrics.append(metric)
        logger.debug(
            "metric_accumulated",
            measurement=measurement,
            tags=metric.tags,
            field_count=len(metric.fields),
        )

    def filter(self, measurement: str) -> list[Metric]:
        """Return the metrics recorded for one measurement, in order."""
        return [m for m in self.metrics if m.measurement == measurement]

    def drain(self) -> list[Metric]:
        """Return all recorded metrics and empty the buffer."""
        drained, self.metrics = self.metrics, []
        return drained

    def clear(self) -> None:
        self.metrics.clear()

    def __len__(self) -> int:
        return len(self.metrics)
