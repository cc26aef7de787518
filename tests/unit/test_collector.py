"""Unit tests for the background gather loop."""

import asyncio
import threading
from unittest.mock import AsyncMock, patch

import pytest

from src.filestat.accumulator import MemoryAccumulator
from src.filestat.config.manager import ConfigManager
from src.filestat.inputs.filestat import FileStat, GatherError
from src.filestat.runtime.collector import gather_loop, gather_once


class _StaticInput:
    """Input emitting one metric, or raising a preset error."""

    def __init__(self, error=None):
        self.error = error
        self.calls = 0

    def description(self):
        return "static"

    def sample_config(self):
        return ""

    def gather(self, acc):
        self.calls += 1
        acc.add_fields("static", {"value": self.calls})
        if self.error is not None:
            raise self.error


class _BlockingInput(_StaticInput):
    def __init__(self):
        super().__init__()
        self.release = threading.Event()

    def gather(self, acc):
        self.release.wait(timeout=5)


async def test_gather_once_success(tmp_path):
    path = tmp_path / "a"
    path.write_bytes(b"hello")
    acc = MemoryAccumulator()

    result = await gather_once(FileStat(files=[str(path)], md5=True), acc)

    assert result is None
    assert acc.metrics[0].fields["md5_sum"] == "5d41402abc4b2a76b9719d911017c592"


async def test_gather_once_returns_aggregate_error():
    acc = MemoryAccumulator()
    error = GatherError(errors=["stat failed"])

    result = await gather_once(_StaticInput(error=error), acc)

    assert result is error
    assert len(acc) == 1


async def test_gather_once_returns_fatal_error():
    acc = MemoryAccumulator()
    error = OSError(5, "Input/output error")

    result = await gather_once(_StaticInput(error=error), acc)

    assert result is error


async def test_gather_once_timeout():
    plugin = _BlockingInput()
    try:
        result = await gather_once(plugin, MemoryAccumulator(), timeout_seconds=0.05)
    finally:
        plugin.release.set()

    assert isinstance(result, asyncio.TimeoutError)


async def test_gather_loop_runs_requested_iterations():
    plugin = _StaticInput()
    acc = MemoryAccumulator()

    with patch("src.filestat.runtime.collector.asyncio.sleep", new=AsyncMock()) as sleep:
        await gather_loop(plugin, acc, interval_seconds=7, max_iterations=3)

    assert plugin.calls == 3
    assert [m.fields["value"] for m in acc.metrics] == [1, 2, 3]
    # No sleep after the final gather
    assert sleep.await_count == 2
    sleep.assert_awaited_with(7)


async def test_gather_loop_survives_errors():
    plugin = _StaticInput(error=OSError(5, "Input/output error"))
    acc = MemoryAccumulator()

    with patch("src.filestat.runtime.collector.asyncio.sleep", new=AsyncMock()):
        await gather_loop(plugin, acc, interval_seconds=1, max_iterations=2)

    assert plugin.calls == 2


async def test_gather_loop_is_cancellable():
    plugin = _StaticInput()
    task = asyncio.create_task(gather_loop(plugin, MemoryAccumulator(), interval_seconds=3600))
    await asyncio.sleep(0.05)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert plugin.calls == 1


async def test_gather_loop_rereads_agent_settings_each_iteration(tmp_path):
    manager = ConfigManager(config_file=tmp_path / "none.toml", env_file=tmp_path / "none.env")
    manager.load_dynamic_config_defaults()
    sleeps = []

    async def _sleep_and_retune(seconds):
        sleeps.append(seconds)
        await manager.update_dynamic_config("agent.gather_timeout_seconds", 20)
        await manager.update_dynamic_config("agent.interval_seconds", 2)

    gather = AsyncMock(return_value=None)
    with patch("src.filestat.runtime.collector.gather_once", new=gather), patch(
        "src.filestat.runtime.collector.asyncio.sleep", new=_sleep_and_retune
    ):
        await gather_loop(
            _StaticInput(),
            MemoryAccumulator(),
            interval_seconds=99,
            timeout_seconds=99,
            max_iterations=2,
            config=manager,
        )

    assert [c.kwargs["timeout_seconds"] for c in gather.await_args_list] == [5, 20]
    assert sleeps == [10]
