"""Usage errors raised by MetricsRegistry.

Both are programmer errors: querying a timer that was never started, or
reporting on a name the registry does not hold. Neither is retryable.
"""


class MetricsError(Exception):
    """Base class for runtime_metrics errors."""


class TimerNotStartedError(MetricsError, LookupError):
    """Raised by accounting operations on a timer that was never started (or was reset)."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Timer '{name}' has not been started.")


class TimerNotFoundError(MetricsError, LookupError):
    """Raised by report() when the registry holds no timer under the name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Timer '{name}' not found.")
