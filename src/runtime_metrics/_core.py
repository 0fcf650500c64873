"""Core timer registry.

Design by Contract:
- Timer names MUST be non-empty strings (crash if empty)
- Accounting on an unknown timer raises TimerNotStartedError, never a silent no-op
- Elapsed time MUST be non-negative (crash if the clock went backwards)
- Memory deltas are clamped to zero (memory released is not negative usage)

Public methods use beartype for runtime type enforcement.
Memory readings come from a MemoryProbe (psutil-backed by default).
"""

import json
import threading
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass
from typing import Any

from beartype import beartype
from loguru import logger

from runtime_metrics._errors import TimerNotFoundError, TimerNotStartedError
from runtime_metrics._format import format_bytes, format_seconds
from runtime_metrics._memory import MemoryProbe, ProcessMemoryProbe

DEFAULT_TIMER = "default"


@dataclass
class TimerState:
    """Start/stop snapshot of one named timer.

    ``end_*`` fields are None while the timer is running and are set together
    by stop(). ``last_lap_time`` is None until the first lap().
    """

    start_time: float
    start_memory: int
    start_peak: int
    end_time: float | None = None
    end_memory: int | None = None
    end_peak: int | None = None
    last_lap_time: float | None = None

    @property
    def stopped(self) -> bool:
        return self.end_time is not None


class MetricsRegistry:
    """Named timers with duration, memory delta and peak memory accounting.

    Each instance is independent state; share one by passing it around.
    Not thread-safe unless constructed with ``thread_safe=True``.

    Args:
        clock: Time source in fractional seconds (default: time.perf_counter)
        memory_probe: Source of current/peak memory in bytes
            (default: ProcessMemoryProbe)
        thread_safe: Guard every operation with a re-entrant lock (default: False)

    Example:
        metrics = MetricsRegistry()
        metrics.measure(lambda: time.sleep(0.2), "api")
        print(metrics.report("api"))   # [api] 200.312 ms, used 0 B (peak 41.20 MB)

    Accessors called on a running timer substitute a live reading for the
    missing end snapshot, so a timer can be inspected without stopping it.
    """

    @beartype
    def __init__(
        self,
        clock: Callable[[], float] = time.perf_counter,
        memory_probe: MemoryProbe | None = None,
        thread_safe: bool = False,
    ) -> None:
        self._clock = clock
        self._memory = memory_probe if memory_probe is not None else ProcessMemoryProbe()
        self._timers: dict[str, TimerState] = {}
        self._lock = threading.RLock() if thread_safe else nullcontext()

    format_bytes = staticmethod(format_bytes)
    format_seconds = staticmethod(format_seconds)

    def __contains__(self, name: object) -> bool:
        return name in self._timers

    def __len__(self) -> int:
        return len(self._timers)

    def _get(self, name: str) -> TimerState:
        state = self._timers.get(name)
        if state is None:
            raise TimerNotStartedError(name)
        return state

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    @beartype
    def start(self, name: str = DEFAULT_TIMER) -> None:
        """Start (or restart) a timer, capturing time, memory and peak memory."""
        assert name, "Timer name must be non-empty"
        with self._lock:
            self._timers[name] = TimerState(
                start_time=self._clock(),
                start_memory=self._memory.current(),
                start_peak=self._memory.peak(),
            )
        logger.debug(f"Timer '{name}' started")

    @beartype
    def stop(self, name: str = DEFAULT_TIMER) -> None:
        """Stop a timer, capturing the end snapshot. Stopping again overwrites it."""
        with self._lock:
            state = self._get(name)
            state.end_time = self._clock()
            state.end_memory = self._memory.current()
            state.end_peak = self._memory.peak()
        logger.debug(f"Timer '{name}' stopped after {state.end_time - state.start_time:.6f}s")

    @beartype
    def lap(self, name: str = DEFAULT_TIMER) -> float:
        """Seconds since the previous lap (or since start for the first lap).

        Each call advances the reference point, so consecutive laps measure
        disjoint intervals.
        """
        with self._lock:
            state = self._get(name)
            now = self._clock()
            reference = state.last_lap_time if state.last_lap_time is not None else state.start_time
            state.last_lap_time = now

        elapsed = now - reference
        assert elapsed >= 0, (
            f"Lap time cannot be negative: {elapsed:.6f}s. "
            f"Clock went backwards or timing bug."
        )
        logger.debug(f"Timer '{name}' lap: {elapsed:.6f}s")
        return elapsed

    @beartype
    def measure(self, callback: Callable[[], Any], name: str = DEFAULT_TIMER) -> float:
        """Run ``callback`` between start() and stop(), return its duration.

        Exceptions from the callback propagate; the timer is then left
        started but not stopped.
        """
        self.start(name)
        callback()
        self.stop(name)
        return self.get_duration(name)

    @beartype
    @contextmanager
    def track(self, name: str = DEFAULT_TIMER) -> Generator["MetricsRegistry", None, None]:
        """Context manager form of measure().

        Usage:
            with metrics.track("load"):
                rows = load_rows()
            metrics.get_duration("load")
        """
        self.start(name)
        yield self
        self.stop(name)

    @beartype
    def reset(self, name: str | None = None) -> None:
        """Remove one timer (no error if absent), or every timer when name is None."""
        with self._lock:
            if name is None:
                self._timers.clear()
            else:
                self._timers.pop(name, None)
        logger.debug(f"Timer '{name}' reset" if name is not None else "All timers reset")

    def get_timers(self) -> list[str]:
        """Registered timer names in insertion order."""
        with self._lock:
            return list(self._timers)

    # -----------------------------------------------------------------------
    # Accounting
    # -----------------------------------------------------------------------

    @beartype
    def get_duration(self, name: str = DEFAULT_TIMER) -> float:
        """Seconds from start to stop, or to now if the timer is still running."""
        with self._lock:
            state = self._get(name)
            end = state.end_time if state.end_time is not None else self._clock()

        duration = end - state.start_time
        assert duration >= 0, (
            f"Duration cannot be negative: {duration:.6f}s. "
            f"Clock went backwards or timing bug."
        )
        return duration

    @beartype
    def get_memory_usage(self, name: str = DEFAULT_TIMER, formatted: bool = True) -> str | int:
        """Resident memory gained between start and stop (or now), never negative."""
        with self._lock:
            state = self._get(name)
            end_memory = state.end_memory if state.end_memory is not None else self._memory.current()

        used = max(0, end_memory - state.start_memory)
        return format_bytes(used) if formatted else used

    @beartype
    def get_peak_memory_usage(self, name: str = DEFAULT_TIMER, formatted: bool = True) -> str | int:
        """Peak resident memory recorded at stop, or the live peak if still running.

        A stopped timer reports its stored end snapshot; a running one reads the
        process peak fresh, not the value captured at start.
        """
        with self._lock:
            state = self._get(name)
            peak = state.end_peak if state.stopped else self._memory.peak()

        return format_bytes(peak) if formatted else peak

    # -----------------------------------------------------------------------
    # Reporting & export
    # -----------------------------------------------------------------------

    @beartype
    def report(self, name: str = DEFAULT_TIMER, formatted: bool = True) -> str:
        """One line: ``[name] <duration>, used <memory> (peak <peak>)``.

        With ``formatted=False`` duration is raw seconds and memory raw bytes.
        """
        with self._lock:
            if name not in self._timers:
                raise TimerNotFoundError(name)

            duration: float | str = self.get_duration(name)
            memory = self.get_memory_usage(name, formatted)
            peak = self.get_peak_memory_usage(name, formatted)

        if formatted:
            duration = format_seconds(duration)
        return f"[{name}] {duration}, used {memory} (peak {peak})"

    @beartype
    def report_all(self, formatted: bool = True) -> str:
        """report() for every timer in registry order, newline separated."""
        with self._lock:
            return "\n".join(self.report(name, formatted) for name in self._timers)

    def to_array(self) -> dict[str, dict[str, float | int]]:
        """Raw per-timer metrics for structured consumption.

        Returns:
            Dictionary mapping timer name to
            ``{"duration": seconds, "memory": bytes, "peak": bytes}``.
        """
        with self._lock:
            return {
                name: {
                    "duration": self.get_duration(name),
                    "memory": self.get_memory_usage(name, formatted=False),
                    "peak": self.get_peak_memory_usage(name, formatted=False),
                }
                for name in self._timers
            }

    @beartype
    def to_json(self, indent: int | None = 2) -> str:
        """to_array() serialized as JSON (pretty-printed unless indent is None)."""
        return json.dumps(self.to_array(), indent=indent)

    @beartype
    def log_report(self, title: str = "RUNTIME METRICS", formatted: bool = True) -> None:
        """Log report_all() via loguru, one line per timer."""
        report = self.report_all(formatted)
        if not report:
            logger.info(f"[{title}] No timers recorded")
            return

        logger.info(f"[{title}] {len(self)} timer(s)")
        for line in report.splitlines():
            logger.info(f"  {line}")
