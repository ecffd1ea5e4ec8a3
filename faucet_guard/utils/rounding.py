from __future__ import annotations

import math


def round_half_up(x: float) -> int:
    """Integer rounding with .5 going up, not to even."""
    return int(math.floor(x + 0.5))


def rate_percent(part: int, total: int) -> int:
    return round_half_up(part / total * 100) if total else 0
