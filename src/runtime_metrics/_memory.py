"""Process memory readings used for start/stop snapshots.

MemoryProbe is the seam: MetricsRegistry only needs two integers in bytes,
the current resident set and the peak resident set. ProcessMemoryProbe reads
them from psutil (and the OS high-water mark where psutil does not expose it).
"""

import sys
from typing import Protocol, runtime_checkable

import psutil

if sys.platform != "win32":
    import resource


@runtime_checkable
class MemoryProbe(Protocol):
    def current(self) -> int: ...

    def peak(self) -> int: ...


class ProcessMemoryProbe:
    """Reads resident and peak resident memory of the current process.

    Peak source by platform:
        - Windows: psutil ``memory_info().peak_wset``
        - Linux: ``resource.getrusage(RUSAGE_SELF).ru_maxrss`` (kilobytes)
        - macOS: same call, already in bytes

    The peak is never reported below the current rss, so a peak reading is
    always >= the matching current reading.
    """

    def __init__(self) -> None:
        self._process = psutil.Process()

    def current(self) -> int:
        return int(self._process.memory_info().rss)

    def peak(self) -> int:
        info = self._process.memory_info()
        peak_wset = getattr(info, "peak_wset", None)
        if peak_wset is not None:
            high_water = int(peak_wset)
        else:
            max_rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
            high_water = max_rss if sys.platform == "darwin" else max_rss * 1024
        return max(high_water, int(info.rss))
