"""Background gather loop for input plugins.

Runs a plugin's blocking gather in a worker thread every N seconds, handing
observations to an accumulator owned by the host runtime.

Design principles:
- Independent failure domain: gather errors are logged, never crash the loop
- Non-blocking: the plugin's filesystem I/O is offloaded via asyncio.to_thread
- Live tuning: with a ConfigManager, interval and timeout follow agent.* updates
- Caller-side deadline: an optional timeout abandons a slow gather; the
  worker thread runs to completion but its outcome is discarded
"""

import asyncio
import time
from typing import Optional

import structlog

from ..config.manager import ConfigManager
from ..inputs.base import Accumulator, Input
from ..inputs.filestat import GatherError

logger = structlog.get_logger(__name__)


async def gather_once(
    plugin: Input,
    acc: Accumulator,
    timeout_seconds: Optional[float] = None,
) -> Optional[BaseException]:
    """Run one gather and report how it ended.

    Args:
        plugin: Input to gather from.
        acc: Accumulator receiving observations.
        timeout_seconds: Optional deadline for the whole gather.

    Returns:
        None on success, otherwise the GatherError, fatal error, or
        TimeoutError that ended the gather.
    """
    start_ns = time.perf_counter_ns()
    try:
        await asyncio.wait_for(asyncio.to_thread(plugin.gather, acc), timeout=timeout_seconds)
    except GatherError as exc:
        logger.warning(
            "gather_partial_failure",
            plugin=type(plugin).__name__,
            error_count=len(exc.errors),
            error=str(exc),
        )
        return exc
    except asyncio.TimeoutError as exc:
        logger.error(
            "gather_timed_out",
            plugin=type(plugin).__name__,
            timeout_seconds=timeout_seconds,
        )
        return exc
    except Exception as exc:  # noqa: BLE001
        logger.error(
            "gather_failed",
            plugin=type(plugin).__name__,
            error=str(exc),
            exc_info=True,
        )
        return exc

    duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
    logger.debug(
        "gather_completed",
        plugin=type(plugin).__name__,
        duration_ms=round(duration_ms, 1),
    )
    return None


async def gather_loop(
    plugin: Input,
    acc: Accumulator,
    interval_seconds: int = 10,
    timeout_seconds: Optional[float] = None,
    max_iterations: Optional[int] = None,
    config: Optional[ConfigManager] = None,
) -> None:
    """Background task: gather from `plugin` every N seconds.

    Args:
        plugin: Input to gather from.
        acc: Accumulator receiving observations.
        interval_seconds: Gather frequency (default 10, range 1-3600).
        timeout_seconds: Optional per-gather deadline.
        max_iterations: Stop after this many gathers (None runs forever).
        config: When given, agent.interval_seconds and
            agent.gather_timeout_seconds are re-read before every gather
            and take precedence over the arguments.
    """
    logger.info(
        "gather_loop_started",
        plugin=type(plugin).__name__,
        interval_seconds=interval_seconds,
        follows_config=config is not None,
    )

    iterations = 0
    while max_iterations is None or iterations < max_iterations:
        if config is not None:
            interval_seconds = config.get("agent.interval_seconds")
            timeout_seconds = config.get("agent.gather_timeout_seconds")
        await gather_once(plugin, acc, timeout_seconds=timeout_seconds)
        iterations += 1
        if max_iterations is not None and iterations >= max_iterations:
            break
        await asyncio.sleep(interval_seconds)

    logger.info("gather_loop_stopped", plugin=type(plugin).__name__, iterations=iterations)
