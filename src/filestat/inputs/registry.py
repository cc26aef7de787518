"""Process-wide registry of input plugins.

Plugins register a creator under a name; the host runtime asks the registry
for a fresh instance with its options already bound.
"""

from __future__ import annotations

from typing import Any, Callable

import structlog

from .base import Input
from ..config.manager import ConfigManager
from ..config.registry import get_dynamic_keys, get_keys_with_prefix

logger = structlog.get_logger(__name__)

Creator = Callable[..., Input]

INPUTS: dict[str, Creator] = {}


def add(name: str, creator: Creator) -> None:
    """Register an input creator.

    Raises:
        ValueError: If the name is already registered
    """
    if name in INPUTS:
        raise ValueError(f"Input '{name}' is already registered")
    INPUTS[name] = creator
    logger.debug("input_registered", name=name)


def get_creator(name: str) -> Creator:
    """Look up a registered creator.

    Raises:
        KeyError: If no input is registered under the name
    """
    if name not in INPUTS:
        raise KeyError(f"Input '{name}' not found in registry")
    return INPUTS[name]


def available() -> list[str]:
    return sorted(INPUTS)


def create(name: str, **options: Any) -> Input:
    """Return a fresh instance of a registered input with `options` bound."""
    plugin = get_creator(name)(**options)
    logger.info("input_created", name=name, options=sorted(options))
    return plugin


def create_from_config(name: str, config: ConfigManager) -> Input:
    """Return a fresh instance bound to the `inputs.<name>.*` config keys.

    Dynamic keys under the prefix keep following hot updates: a new value is
    set on the instance and applies from its next gather.
    """
    prefix = f"inputs.{name}"
    plugin = create(name, **config.get_section(prefix))
    live_keys = set(get_keys_with_prefix(prefix)) & set(get_dynamic_keys())

    def _apply_update(key: str, value: Any) -> None:
        if key in live_keys:
            setattr(plugin, key.rsplit(".", 1)[-1], value)
            logger.info("input_option_updated", name=name, key=key, value=value)

    config.subscribe(_apply_update)
    return plugin
