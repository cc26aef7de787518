"""structlog setup for the probe and its host runtime."""

from __future__ import annotations

import logging

import structlog

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog with level filtering and console or JSON rendering.

    Raises:
        ValueError: If `level` is not a known level name
    """
    if level not in LEVELS:
        raise ValueError(f"Unknown log level: {level}")

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(LEVELS[level]),
        cache_logger_on_first_use=False,
    )


def configure_from_config(config) -> None:
    """Apply logging.* keys from a ConfigManager and follow level updates."""
    json_output = bool(config.get("logging.json"))
    configure_logging(config.get("logging.level"), json_output=json_output)

    def _on_update(key, value):
        if key == "logging.level":
            configure_logging(value, json_output=json_output)

    config.subscribe(_on_update)
