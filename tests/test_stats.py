import pytest
import numpy as np

from scopeprof.stats import StatsAccumulator


def _fed(samples):
    acc = StatsAccumulator()
    for s in samples:
        acc.update(float(s))
    return acc


# --- Basic accumulation ---

def test_accumulator_initialization():
    acc = StatsAccumulator()
    assert acc.count == 0
    assert acc.total == 0.0
    assert acc.mean == 0.0
    assert acc.m2 == 0.0
    assert acc.variance == 0.0
    assert acc.std == 0.0

def test_single_sample():
    acc = _fed([0.25])
    assert acc.count == 1
    assert acc.total == 0.25
    assert acc.last == 0.25
    assert acc.min == acc.max == acc.mean == 0.25
    assert acc.std == 0.0 # defined as 0 for one sample

def test_min_max_last_total():
    samples = [3.0, 1.0, 4.0, 1.0, 5.0, 9.0, 2.0, 6.0]
    acc = _fed(samples)
    assert acc.count == len(samples)
    assert acc.min == 1.0
    assert acc.max == 9.0
    assert acc.last == 6.0
    assert np.isclose(acc.total, sum(samples))
    assert np.isclose(acc.mean, np.mean(samples))
    assert acc.min <= acc.mean <= acc.max
    assert acc.m2 >= 0.0

def test_known_variance():
    # mean 5, population variance 4
    acc = _fed([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0])
    assert np.isclose(acc.mean, 5.0)
    assert np.isclose(acc.variance, 4.0)
    assert np.isclose(acc.std, 2.0)

def test_identical_samples_have_zero_std():
    acc = _fed([0.1] * 1000)
    assert acc.m2 >= 0.0
    assert np.isclose(acc.std, 0.0, atol=1e-12)


# --- Agreement with direct computation ---

@pytest.mark.parametrize("n", [1, 2, 3, 10, 100, 1000, 10000])
def test_online_std_matches_numpy(n):
    rng = np.random.default_rng(n)
    samples = rng.exponential(scale=0.01, size=n)
    acc = _fed(samples)

    assert acc.count == n
    assert np.isclose(acc.total, samples.sum())
    assert np.isclose(acc.mean, samples.mean())
    assert np.isclose(acc.std, samples.std(), rtol=1e-7, atol=1e-12) # population std
    assert acc.min == samples.min()
    assert acc.max == samples.max()

def test_large_offset_is_stable():
    # naive sum-of-squares loses everything here
    rng = np.random.default_rng(0)
    samples = 1e6 + rng.normal(0.0, 1e-3, size=5000)
    acc = _fed(samples)
    assert np.isclose(acc.std, samples.std(), rtol=1e-4)


# --- Merge / copy ---

def test_merge_matches_sequential_updates():
    rng = np.random.default_rng(7)
    a_samples = rng.uniform(0, 1, 50)
    b_samples = rng.uniform(2, 3, 30)

    merged = _fed(a_samples)
    merged.merge(_fed(b_samples))
    sequential = _fed(np.concatenate([a_samples, b_samples]))

    assert merged.count == sequential.count
    assert np.isclose(merged.total, sequential.total)
    assert np.isclose(merged.mean, sequential.mean)
    assert np.isclose(merged.m2, sequential.m2)
    assert merged.min == sequential.min
    assert merged.max == sequential.max
    assert merged.last == b_samples[-1]

def test_merge_with_empty():
    acc = _fed([1.0, 2.0])
    before = acc.state_dict()
    acc.merge(StatsAccumulator())
    assert acc.state_dict() == before

    empty = StatsAccumulator()
    empty.merge(acc)
    assert empty.state_dict() == before

def test_copy_is_independent():
    acc = _fed([1.0, 2.0])
    clone = acc.copy()
    acc.update(10.0)
    assert clone.count == 2
    assert clone.max == 2.0

def test_reset():
    acc = _fed([1.0, 2.0, 3.0])
    acc.reset()
    assert acc.state_dict() == StatsAccumulator().state_dict()
