"""Human-readable byte and duration formatting."""

import math
from typing import Union

BYTE_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]
BYTE_BASE = 1024

# Units from this index on are shown with one decimal place
_DECIMAL_UNIT_INDEX = 3


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_bytes(num_bytes: Union[int, float]) -> str:
    """
    Format a byte count with base-1024 scaling.

    Bytes, KB and MB are rounded to whole numbers; GB and TB keep one
    decimal place. ``0`` renders as ``"0 Bytes"``.
    """
    if num_bytes <= 0:
        return "0 Bytes"

    index = int(math.floor(math.log(num_bytes) / math.log(BYTE_BASE)))
    index = max(0, min(index, len(BYTE_UNITS) - 1))
    value = num_bytes / math.pow(BYTE_BASE, index)

    if index >= _DECIMAL_UNIT_INDEX:
        return f"{value:.1f} {BYTE_UNITS[index]}"
    return f"{_round_half_up(value)} {BYTE_UNITS[index]}"


def format_duration(seconds: Union[int, float]) -> str:
    """Format seconds as ``45s``, ``2m 5s`` or ``1h 1m``."""
    total = max(0, int(math.floor(seconds)))

    if total < 60:
        return f"{total}s"

    if total < 3600:
        minutes, secs = divmod(total, 60)
        return f"{minutes}m {secs}s" if secs else f"{minutes}m"

    hours, remainder = divmod(total, 3600)
    minutes = remainder // 60
    return f"{hours}h {minutes}m" if minutes else f"{hours}h"
