"""Observability subsystem for the filestat probe.

Provides structlog configuration driven by the logging.* config keys.
"""

from .log_config import configure_from_config, configure_logging

__all__ = ["configure_from_config", "configure_logging"]
