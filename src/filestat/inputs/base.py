"""Interfaces shared by input plugins and the metric sinks they report to."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol


class Accumulator(Protocol):
    """
    Receives observations from input plugins. Buffering, tagging conventions
    and transport belong to the implementation.
    """

    def add_fields(
        self,
        measurement: str,
        fields: Mapping[str, Any],
        tags: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Record one observation for `measurement`."""


class Input(Protocol):
    """
    A probe invoked periodically by the host runtime.
    """

    def description(self) -> str:
        """One-line human description of the input."""

    def sample_config(self) -> str:
        """TOML snippet documenting the input's options."""

    def gather(self, acc: Accumulator) -> None:
        """
        Collect one round of observations into `acc`.

        Raises on failure; partial results may already have been recorded.
        """
