"""Display helpers for snapshot values."""

from __future__ import annotations

from datetime import UTC, datetime

_BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_uptime(seconds: float) -> str:
    """Render an uptime as ``Xd Yh Zm``, dropping leading zero units."""
    total = max(0, int(seconds))
    days = total // 86_400
    hours = (total % 86_400) // 3_600
    minutes = (total % 3_600) // 60

    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_bytes(num_bytes: float) -> str:
    """Render a byte count in 1024-based units with up to two decimals."""
    if num_bytes <= 0:
        return "0 B"
    scaled = float(num_bytes)
    unit = 0
    while scaled >= 1024 and unit < len(_BYTE_UNITS) - 1:
        scaled /= 1024
        unit += 1
    text = f"{scaled:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_BYTE_UNITS[unit]}"


def format_percent(value: float, digits: int = 1) -> str:
    return f"{value:.{digits}f}%"


def format_count(value: float) -> str:
    return f"{value:g}" if value != int(value) else str(int(value))


def format_start_time(epoch_seconds: float) -> str:
    """Render an epoch-seconds start time as a local timestamp."""
    started = datetime.fromtimestamp(epoch_seconds, tz=UTC).astimezone()
    return started.strftime("%Y-%m-%d %H:%M:%S")
