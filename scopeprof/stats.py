from __future__ import annotations

import numpy as np


class StatsAccumulator:
    """
    Streaming duration statistics with O(1) memory.

    Mean and variance use Welford's online recurrence, so the accumulator
    stays numerically stable after millions of updates without keeping the
    raw samples around. Durations are in seconds.
    """

    __slots__ = ("count", "total", "last", "min", "max", "mean", "m2")

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.count = 0
        self.total = 0.0
        self.last = 0.0
        self.min = 0.0
        self.max = 0.0
        self.mean = 0.0
        self.m2 = 0.0

    def update(self, duration: float) -> None:
        """Feed one duration sample (seconds)."""
        self.count += 1
        self.total += duration
        self.last = duration
        if self.count == 1:
            self.min = self.max = duration
        else:
            if duration < self.min:
                self.min = duration
            if duration > self.max:
                self.max = duration

        delta = duration - self.mean
        self.mean += delta / self.count
        delta2 = duration - self.mean
        self.m2 += delta * delta2

    def merge(self, other: "StatsAccumulator") -> None:
        """
        Fold another accumulator into this one (Chan et al. pairwise update).

        ``last`` follows *other* when it holds samples, as if its samples
        came after ours.
        """
        if other.count == 0:
            return
        if self.count == 0:
            for attr in self.__slots__:
                setattr(self, attr, getattr(other, attr))
            return

        n_a, n_b = self.count, other.count
        tot_n = n_a + n_b
        delta = other.mean - self.mean

        self.mean += delta * n_b / tot_n
        self.m2 += other.m2 + delta**2 * n_a * n_b / tot_n
        self.count = tot_n
        self.total += other.total
        self.last = other.last
        self.min = min(self.min, other.min)
        self.max = max(self.max, other.max)

    def copy(self) -> "StatsAccumulator":
        clone = StatsAccumulator()
        for attr in self.__slots__:
            setattr(clone, attr, getattr(self, attr))
        return clone

    @property
    def variance(self) -> float:
        """Population variance; 0 until two samples have been seen."""
        if self.count <= 1:
            return 0.0
        return max(self.m2, 0.0) / self.count

    @property
    def std(self) -> float:
        return float(np.sqrt(self.variance))

    def state_dict(self) -> dict:
        return {attr: getattr(self, attr) for attr in self.__slots__}

    def __repr__(self) -> str:
        return (f"StatsAccumulator(count={self.count}, total={self.total:.6g}, "
                f"mean={self.mean:.6g}, std={self.std:.6g})")
