"""Human-readable formatting for byte and time magnitudes.

Pure functions with no dependency on timer state.
"""

from beartype import beartype

BYTE_UNITS: tuple[str, ...] = ("B", "KB", "MB", "GB", "TB")


def _trim(text: str) -> str:
    # 5.000 -> 5, 1.250 -> 1.25; integers are left alone
    if "." not in text:
        return text
    return text.rstrip("0").rstrip(".")


@beartype
def format_bytes(num_bytes: int, precision: int = 2) -> str:
    """Format a byte count with a binary unit suffix.

    Args:
        num_bytes: Byte count (negative values are clamped to 0)
        precision: Decimal digits kept after scaling (default: 2)

    Returns:
        String like "1.50 MB". Zero renders as "0 B" regardless of precision.
        Units top out at TB; larger values stay in TB.

    Example:
        >>> format_bytes(1024, 0)
        '1 KB'
    """
    assert precision >= 0, f"Precision must be non-negative: {precision}"
    num_bytes = max(num_bytes, 0)
    if num_bytes == 0:
        return "0 B"

    # floor(log_1024(n)) computed on the integer to avoid float error at exact powers
    power = min((num_bytes.bit_length() - 1) // 10, len(BYTE_UNITS) - 1)
    value = num_bytes / 1024**power
    return f"{value:.{precision}f} {BYTE_UNITS[power]}"


@beartype
def format_seconds(seconds: int | float, precision: int = 3) -> str:
    """Format a duration as milliseconds below one second, seconds otherwise.

    Trailing zeros are dropped ("5 ms", "1.2 s"). There is no minute/hour
    rollover: 3600.0 renders as "3600 s".
    """
    assert precision >= 0, f"Precision must be non-negative: {precision}"
    if seconds < 1:
        value, unit = seconds * 1000, "ms"
    else:
        value, unit = seconds, "s"
    return f"{_trim(f'{value:.{precision}f}')} {unit}"
