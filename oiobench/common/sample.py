"""
Append-only sample sets and the measurement triple built from them.
"""

import math
import logging
from typing import Iterable, List, Optional

import numpy as np

logger = logging.getLogger(__name__)


class SampleSet:
    """Append-only collection of float observations for one measured quantity.

    Statistics are computed on demand and never cached. On an empty set every
    statistic returns NaN and a warning is logged.
    """

    def __init__(self, values: Optional[Iterable[float]] = None):
        self._values: List[float] = [float(v) for v in values] if values is not None else []

    def add(self, value: float) -> None:
        """Append one observation."""
        self._values.append(value)

    def merge(self, other: "SampleSet") -> "SampleSet":
        """Return a new set holding the observations of both sets."""
        merged = SampleSet()
        merged._values = self._values + other._values
        return merged

    @property
    def values(self) -> List[float]:
        """Copy of the observations in arrival order."""
        return list(self._values)

    def count(self) -> int:
        return len(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def _empty(self, statistic: str) -> bool:
        if self._values:
            return False
        logger.warning(f"{statistic} requested on an empty sample set, returning NaN")
        return True

    def min(self) -> float:
        if self._empty("min"):
            return math.nan
        return float(np.min(self._values))

    def max(self) -> float:
        if self._empty("max"):
            return math.nan
        return float(np.max(self._values))

    def avg(self) -> float:
        if self._empty("avg"):
            return math.nan
        return float(np.mean(self._values))

    def stdev(self) -> float:
        """Population standard deviation (divides by N)."""
        if self._empty("stdev"):
            return math.nan
        return float(np.std(self._values, ddof=0))

    def percentile(self, percentile: float) -> float:
        """Nearest-rank percentile, not interpolated.

        Sorts a copy of the observations on every call, so keep it out of
        the timed loop.

        Args:
            percentile: Value in [0, 100]

        Returns:
            The element at index floor((N - 1) * percentile / 100)
        """
        if not 0.0 <= percentile <= 100.0:
            raise ValueError(f"percentile must be within [0, 100], got {percentile}")
        if self._empty(f"p{percentile:g}"):
            return math.nan
        ordered = np.sort(np.asarray(self._values, dtype=np.float64))
        index = int(math.floor((len(ordered) - 1) * percentile / 100.0))
        return float(ordered[index])

    def __repr__(self) -> str:
        return f"SampleSet(count={len(self._values)})"


class Measurement:
    """Bandwidth (bytes/s), latency (ms) and iops (ops/s) sample sets of a run or a worker."""

    def __init__(
        self,
        bandwidth: Optional[SampleSet] = None,
        latency: Optional[SampleSet] = None,
        iops: Optional[SampleSet] = None,
    ):
        self.bandwidth = bandwidth if bandwidth is not None else SampleSet()
        self.latency = latency if latency is not None else SampleSet()
        self.iops = iops if iops is not None else SampleSet()

    def merge(self, other: "Measurement") -> "Measurement":
        return Measurement(
            bandwidth=self.bandwidth.merge(other.bandwidth),
            latency=self.latency.merge(other.latency),
            iops=self.iops.merge(other.iops),
        )

    @property
    def iterations(self) -> int:
        """Completed operations; every iteration adds one sample to each set."""
        return self.latency.count()

    def __iter__(self):
        return iter((self.bandwidth, self.latency, self.iops))

    def __repr__(self) -> str:
        return f"Measurement(iterations={self.iterations})"
