"""Tests for RefreshScheduler cadences and cancellation."""

from __future__ import annotations

import asyncio
import math

import pytest

from countdown.core.errors import ConfigurationError
from countdown.core.scheduler import RefreshScheduler
from tests.helpers.runtime import wait_for


class _Counter:
    def __init__(self) -> None:
        self.ticks = 0
        self.fetches = 0

    def tick(self) -> None:
        self.ticks += 1

    def fetch(self) -> None:
        self.fetches += 1


class TestValidation:
    @pytest.mark.parametrize("bad", [0, -1, math.nan, math.inf])
    def test_rejects_bad_fetch_interval(self, bad):
        c = _Counter()
        with pytest.raises(ConfigurationError):
            RefreshScheduler(1.0, bad, c.tick, c.fetch)

    def test_rejects_bad_tick_interval(self):
        c = _Counter()
        with pytest.raises(ConfigurationError):
            RefreshScheduler(0, 60, c.tick, c.fetch)


class TestCadence:
    async def test_fetch_fires_eagerly(self):
        c = _Counter()
        sched = RefreshScheduler(60, 60, c.tick, c.fetch)
        sched.start()
        try:
            await wait_for(lambda: c.fetches == 1, timeout=1.0)
            assert c.ticks == 0
        finally:
            await sched.stop()

    async def test_independent_periods(self):
        c = _Counter()
        sched = RefreshScheduler(0.02, 60, c.tick, c.fetch)
        sched.start()
        try:
            await wait_for(lambda: c.ticks >= 5, timeout=2.0)
            assert c.fetches == 1
        finally:
            await sched.stop()

    async def test_raising_callback_keeps_loop_alive(self):
        calls = 0

        def bad_tick() -> None:
            nonlocal calls
            calls += 1
            raise RuntimeError("boom")

        sched = RefreshScheduler(0.02, 60, bad_tick, lambda: None)
        sched.start()
        try:
            await wait_for(lambda: calls >= 3, timeout=2.0)
        finally:
            await sched.stop()

    async def test_start_twice_is_noop(self):
        c = _Counter()
        sched = RefreshScheduler(60, 60, c.tick, c.fetch)
        sched.start()
        sched.start()
        try:
            await asyncio.sleep(0.05)
            assert c.fetches == 1
        finally:
            await sched.stop()


class TestStop:
    async def test_no_callbacks_after_stop(self):
        c = _Counter()
        sched = RefreshScheduler(0.01, 0.01, c.tick, c.fetch)
        sched.start()
        await wait_for(lambda: c.ticks >= 1, timeout=1.0)
        await sched.stop()
        assert not sched.is_running

        ticks, fetches = c.ticks, c.fetches
        await asyncio.sleep(0.05)
        assert (c.ticks, c.fetches) == (ticks, fetches)

    async def test_stop_without_start(self):
        sched = RefreshScheduler(1, 1, lambda: None, lambda: None)
        await sched.stop()
        assert not sched.is_running
