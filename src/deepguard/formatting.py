from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up.

    Python's round() rounds halves to even; summary figures round 2.5 to 3.
    """
    return int(math.floor(value + 0.5))
