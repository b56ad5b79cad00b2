"""
Summary report of a benchmark run.
"""

import json
import math
import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

import pandas as pd

from oiobench.config import Config
from oiobench.configuration import BYTES_PER_MB, REPORT_PERCENTILES
from oiobench.common.sample import Measurement, SampleSet

logger = logging.getLogger(__name__)


@dataclass
class Metric:
    """Summary statistics of one quantity, already converted to display units."""

    num_samples: int
    min: float
    max: float
    avg: float
    stdev: float
    p99: float
    p95: float
    p50: float

    @classmethod
    def from_samples(cls, samples: SampleSet, scale: float = 1.0) -> "Metric":
        p99, p95, p50 = (samples.percentile(p) * scale for p in REPORT_PERCENTILES)
        return cls(
            num_samples=samples.count(),
            min=samples.min() * scale,
            max=samples.max() * scale,
            avg=samples.avg() * scale,
            stdev=samples.stdev() * scale,
            p99=p99,
            p95=p95,
            p50=p50,
        )


class Report:
    """Bandwidth (MiB/s), latency (ms) and optionally iops (ops/s) of a run."""

    SECTIONS = (
        ("bandwidth", "Bandwidth", "MiB/s"),
        ("latency", "Latency", "ms"),
        ("iops", "IOPS", "ops/s"),
    )

    def __init__(
        self,
        num_jobs: int,
        file_size: int,
        workload: str,
        bandwidth: Metric,
        latency: Metric,
        iops: Optional[Metric] = None,
    ):
        self.num_jobs = num_jobs
        self.file_size = file_size
        self.workload = workload
        self.bandwidth = bandwidth
        self.latency = latency
        self.iops = iops

    @classmethod
    def from_measurement(cls, config: Config, measurement: Measurement) -> "Report":
        iops = None
        if config.report.include_iops:
            iops = Metric.from_samples(measurement.iops)
        return cls(
            num_jobs=config.job.num_jobs,
            file_size=config.job.file_size,
            workload=config.job.workload,
            bandwidth=Metric.from_samples(measurement.bandwidth, scale=1.0 / BYTES_PER_MB),
            latency=Metric.from_samples(measurement.latency),
            iops=iops,
        )

    def metrics(self) -> Dict[str, Metric]:
        return {
            name: getattr(self, name)
            for name, _, _ in self.SECTIONS
            if getattr(self, name) is not None
        }

    def to_frame(self) -> pd.DataFrame:
        """One row per quantity, one column per statistic."""
        rows = []
        for name, title, unit in self.SECTIONS:
            metric = getattr(self, name)
            if metric is None:
                continue
            rows.append({'metric': name, 'unit': unit, **asdict(metric)})
        return pd.DataFrame(rows).set_index('metric')

    def to_table(self) -> str:
        return self.to_frame().to_string(float_format="{:.3f}".format)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view; NaN statistics become None."""
        data: Dict[str, Any] = {
            'num_jobs': self.num_jobs,
            'file_size': self.file_size,
            'workload': self.workload,
        }
        for name, metric in self.metrics().items():
            data[name] = {
                key: (None if isinstance(value, float) and math.isnan(value) else value)
                for key, value in asdict(metric).items()
            }
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def __str__(self) -> str:
        lines = [
            f"Workload: {self.workload}",
            f"  num_jobs: {self.num_jobs}",
            f"  file_size(bytes): {self.file_size}",
        ]
        for name, title, unit in self.SECTIONS:
            metric = getattr(self, name)
            if metric is None:
                continue
            lines.append("")
            lines.append(f"{title}:")
            lines.append(f"  num_samples: {metric.num_samples}")
            for stat in ("min", "max", "avg", "stdev", "p99", "p95", "p50"):
                lines.append(f"  {stat}({unit}): {getattr(metric, stat):.3f}")
        return "\n".join(lines)
