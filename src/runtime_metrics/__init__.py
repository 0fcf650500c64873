"""runtime-metrics: Named timers with duration and memory accounting.

Provides:
- MetricsRegistry: Named start/stop/lap timers with memory delta and peak tracking,
  human-readable reports and JSON export
- format_bytes / format_seconds: Pure formatting helpers for byte and time magnitudes
- TimerNotStartedError / TimerNotFoundError: Usage errors for unknown timers
- ProcessMemoryProbe: psutil-backed current/peak memory source

Usage:
    from runtime_metrics import MetricsRegistry

    metrics = MetricsRegistry()

    metrics.start("load")
    rows = load_rows()
    metrics.lap("load")
    index = build_index(rows)
    metrics.stop("load")

    metrics.measure(lambda: time.sleep(0.2), "api")

    print(metrics.report_all())
    print(metrics.to_json())
"""

from runtime_metrics._core import DEFAULT_TIMER, MetricsRegistry, TimerState
from runtime_metrics._errors import MetricsError, TimerNotFoundError, TimerNotStartedError
from runtime_metrics._format import format_bytes, format_seconds
from runtime_metrics._memory import MemoryProbe, ProcessMemoryProbe

__all__ = [
    "DEFAULT_TIMER",
    "MemoryProbe",
    "MetricsError",
    "MetricsRegistry",
    "ProcessMemoryProbe",
    "TimerNotFoundError",
    "TimerNotStartedError",
    "TimerState",
    "format_bytes",
    "format_seconds",
]

__version__ = "0.1.0"
