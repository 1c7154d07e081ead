# tests/test_stats_kernel.py

from types import SimpleNamespace

import numpy as np
import pytest
from scipy import stats

from moodlog.utils.db.models import Computed, InsufficientData
from moodlog.utils.reporting.analytics.stats_kernel import (
    correlate,
    pearson_correlation,
    rank_key,
    safe_mean,
)

# ────────────────────────────────────────────────────────────────────────────────
# pearson_correlation
# ────────────────────────────────────────────────────────────────────────────────


def test_perfect_positive_and_negative():
    assert pearson_correlation([1, 2, 3, 4], [2, 4, 6, 8]) == pytest.approx(1.0)
    assert pearson_correlation([1, 2, 3, 4], [8, 6, 4, 2]) == pytest.approx(-1.0)


@pytest.mark.parametrize("seed", [1, 7, 42])
def test_matches_scipy_pearsonr(seed):
    rng = np.random.default_rng(seed)
    x = rng.normal(size=40)
    y = 0.5 * x + rng.normal(size=40)
    expected, _ = stats.pearsonr(x, y)
    assert pearson_correlation(list(x), list(y)) == pytest.approx(expected, abs=1e-9)


def test_point_biserial_matches_scipy():
    present = [1.0, 0.0, 1.0, 1.0, 0.0, 0.0, 1.0, 0.0]
    moods = [5.0, 3.0, 4.5, 6.0, 2.0, 3.5, 5.0, 4.0]
    expected, _ = stats.pointbiserialr(present, moods)
    assert pearson_correlation(present, moods) == pytest.approx(expected, abs=1e-9)


@pytest.mark.parametrize("x, y", [
    ([], []),
    ([1.0], [2.0]),
    ([1.0, 2.0], [3.0, 5.0]),
    ([1.0, 2.0, 3.0], [1.0, 2.0]),
])
def test_too_few_or_mismatched_pairs_is_none(x, y):
    assert pearson_correlation(x, y) is None


def test_constant_series_is_none():
    assert pearson_correlation([3, 3, 3, 3], [1, 2, 3, 4]) is None
    assert pearson_correlation([1, 2, 3, 4], [5, 5, 5, 5]) is None
    # values with no exact binary representation
    assert pearson_correlation([0.1] * 7, [1, 2, 3, 4, 5, 6, 7]) is None


def test_result_never_leaves_unit_interval():
    rng = np.random.default_rng(3)
    for _ in range(50):
        x = rng.uniform(0, 1e6, size=12)
        r = pearson_correlation(list(x), list(x * 3.0 + 1e-3))
        assert -1.0 <= r <= 1.0


# ────────────────────────────────────────────────────────────────────────────────
# correlate / safe_mean / rank_key
# ────────────────────────────────────────────────────────────────────────────────


def test_correlate_outcomes():
    computed = correlate([1, 2, 3], [1, 2, 4])
    assert isinstance(computed, Computed)
    assert computed.coefficient == pytest.approx(stats.pearsonr([1, 2, 3], [1, 2, 4])[0])

    short = correlate([1, 2], [1, 2])
    assert isinstance(short, InsufficientData)
    assert short.coefficient is None
    assert "2" in short.reason

    flat = correlate([1, 1, 1], [1, 2, 3])
    assert isinstance(flat, InsufficientData)
    assert flat.reason == "no variance"

    assert correlate([1, 2, 3], [1, 2]).reason == "mismatched samples"


def test_safe_mean():
    assert safe_mean([]) is None
    assert safe_mean(iter([2, 4])) == 3


def test_rank_key_orders_by_magnitude_then_sample_size():
    def res(r, n):
        return SimpleNamespace(coefficient=r, sample_size=n)

    results = [res(None, 9), res(0.2, 4), res(-0.8, 3), res(0.2, 10), res(0.5, 1)]
    ordered = sorted(results, key=rank_key)
    assert [(x.coefficient, x.sample_size) for x in ordered] == [
        (-0.8, 3), (0.5, 1), (0.2, 10), (0.2, 4), (None, 9)]
