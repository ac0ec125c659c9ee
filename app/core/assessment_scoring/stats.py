"""Numeric helpers shared by the scoring stages.

Rounding is half-away-from-zero on ``x * 10**ndigits`` so reported values match
previously stored results (gap and trend thresholds are sensitive to it). Do not
replace with the builtin ``round``, which rounds half to even.
"""

import math
from typing import Sequence

import numpy as np


def round_half_away(value: float, ndigits: int = 0) -> float:
    """Round ``value`` to ``ndigits`` places, ties away from zero."""
    factor = 10**ndigits
    scaled = value * factor
    rounded = math.floor(abs(scaled) + 0.5)
    if rounded == 0:
        return 0.0
    return math.copysign(rounded, scaled) / factor


def round2(value: float) -> float:
    return round_half_away(value, 2)


def round_int(value: float) -> int:
    return int(round_half_away(value, 0))


def mean(values: Sequence[float]) -> float:
    """Unweighted arithmetic mean; 0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def population_std_dev(values: Sequence[float]) -> float:
    """Population standard deviation; 0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))


def sample_std_dev(values: Sequence[float]) -> float:
    """Sample (n-1) standard deviation; 0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float), ddof=1))


def percentile(values: Sequence[float], p: float) -> float:
    """Linearly interpolated percentile (0-100); 0 for an empty sequence."""
    if not values:
        return 0.0
    return float(np.percentile(np.asarray(values, dtype=float), p))
