# moodlog/utils/reporting/analytics/stats_kernel.py
'''
Moodlog - Statistics Kernel
Pearson correlation over paired samples. Binary presence/absence against a continuous
outcome (point-biserial) goes through the very same function: callers encode the
binary side as 1.0 / 0.0.
'''

import logging
import math
from typing import Optional, Sequence

import numpy as np

from moodlog.utils.db.models import Computed, Correlation, InsufficientData

logger = logging.getLogger(__name__)

MIN_PAIRS = 3


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> Optional[float]:
    """
    r = (nΣxy − ΣxΣy) / sqrt((nΣx² − (Σx)²)(nΣy² − (Σy)²))

    Returns None when the lengths differ, when there are fewer than 3 pairs, or when
    either series has no variance.
    """
    if len(x) != len(y) or len(x) < MIN_PAIRS:
        return None

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    n = float(len(xs))
    # constant series: the sum formula can leave rounding residue instead of a clean 0
    if np.ptp(xs) == 0 or np.ptp(ys) == 0:
        return None

    sum_x = xs.sum()
    sum_y = ys.sum()
    sum_xy = (xs * ys).sum()
    sum_x2 = (xs * xs).sum()
    sum_y2 = (ys * ys).sum()

    numerator = n * sum_xy - sum_x * sum_y
    variance_product = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    if variance_product <= 0:
        return None
    denominator = math.sqrt(variance_product)
    if denominator == 0 or not math.isfinite(denominator):
        return None

    r = float(numerator / denominator)
    # float rounding can push a perfect fit just past ±1
    return max(-1.0, min(1.0, r))


def correlate(x: Sequence[float], y: Sequence[float]) -> Correlation:
    """Same as pearson_correlation, but returns a Computed / InsufficientData outcome."""
    if len(x) != len(y):
        return InsufficientData("mismatched samples")
    if len(x) < MIN_PAIRS:
        return InsufficientData(f"only {len(x)} paired days")
    r = pearson_correlation(x, y)
    if r is None:
        logger.debug(f"No variance across {len(x)} pairs; correlation undefined")
        return InsufficientData("no variance")
    return Computed(r)


def safe_mean(values) -> Optional[float]:
    """Return the arithmetic mean or None if there are no values."""
    values = list(values)
    if not values:
        return None
    return sum(values) / len(values)


def rank_key(result):
    """
    Sort key for ranked correlations: larger |r| first (no coefficient counts as 0),
    then larger sample size.
    """
    r = result.coefficient
    return (-abs(r) if r is not None else 0.0, -result.sample_size)
