"""Shared fakes for the external time and memory sources.

Only the clock and the memory probe are faked; MetricsRegistry itself is
always a real instance.
"""

import pytest

from runtime_metrics import MetricsRegistry


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeMemoryProbe:
    """MemoryProbe with settable current/peak readings in bytes."""

    def __init__(self, current: int = 1_000_000, peak: int = 2_000_000) -> None:
        self.current_bytes = current
        self.peak_bytes = peak

    def current(self) -> int:
        return self.current_bytes

    def peak(self) -> int:
        return self.peak_bytes


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def probe() -> FakeMemoryProbe:
    return FakeMemoryProbe()


@pytest.fixture
def fake_metrics(clock: FakeClock, probe: FakeMemoryProbe) -> MetricsRegistry:
    return MetricsRegistry(clock=clock, memory_probe=probe)


@pytest.fixture
def metrics() -> MetricsRegistry:
    return MetricsRegistry()
