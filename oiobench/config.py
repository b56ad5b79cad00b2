"""
Job configuration for the benchmark.

Loads a YAML job file into dataclasses and validates it before the benchmark
core ever sees it. Credentials left empty in the file fall back to the
environment defaults from ``configuration``.
"""

import re
import math
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from oiobench.configuration import (
    DEFAULT_ACCESS_KEY,
    DEFAULT_SECRET_KEY,
    DEFAULT_NUM_JOBS,
    MIN_FILE_SIZE,
    SUPPORTED_SERVICES,
    SUPPORTED_WORKLOADS,
    SECONDS_PER_MINUTE,
    SECONDS_PER_HOUR,
)

logger = logging.getLogger(__name__)

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)\s*(ms|min|s|m|h)")
# Seconds per unit; "ms" is divided by 1000 instead
_DURATION_UNITS = {
    "s": 1.0,
    "m": SECONDS_PER_MINUTE,
    "min": SECONDS_PER_MINUTE,
    "h": SECONDS_PER_HOUR,
}


class ConfigError(ValueError):
    """Raised when a job file cannot be loaded or fails validation."""


def parse_duration(value: Union[str, int, float]) -> float:
    """Parse a duration into seconds.

    Accepts a plain number of seconds or a string such as ``"200ms"``,
    ``"30s"``, ``"1min"`` or ``"1h30m"``.
    """
    if isinstance(value, bool):
        raise ConfigError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        raise ConfigError(f"invalid duration: {value!r}")

    text = value.strip().lower()
    if not text:
        raise ConfigError("invalid duration: empty string")
    try:
        return float(text)
    except ValueError:
        pass

    total = 0.0
    position = 0
    for match in _DURATION_PART.finditer(text):
        if text[position:match.start()].strip():
            break
        number, unit = float(match.group(1)), match.group(2)
        total += number / 1000.0 if unit == "ms" else number * _DURATION_UNITS[unit]
        position = match.end()
    if position == 0 or text[position:].strip():
        raise ConfigError(f"invalid duration: {value!r}")
    return total


@dataclass
class ServiceConfig:
    """Object storage service the job runs against."""

    type: str
    bucket: str = ""
    endpoint: str = ""
    prefix: Optional[str] = None
    region: Optional[str] = None
    access_key: str = ""
    secret_key: str = ""
    virtual_hosted_style: bool = False

    def __post_init__(self):
        self.access_key = self.access_key or DEFAULT_ACCESS_KEY
        self.secret_key = self.secret_key or DEFAULT_SECRET_KEY


@dataclass
class JobConfig:
    """Workload parameters."""

    workload: str
    file_size: int
    run_time: float  # seconds
    num_jobs: int = DEFAULT_NUM_JOBS
    cleanup: bool = True


@dataclass
class ReportConfig:
    """What the report renders."""

    include_iops: bool = True


@dataclass
class Config:
    service: ServiceConfig
    job: JobConfig
    report: ReportConfig = field(default_factory=ReportConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Build a config from the parsed job file.

        Raises:
            ConfigError: If a section is missing or holds unknown keys
        """
        if not isinstance(data, dict):
            raise ConfigError("job file must contain a mapping")

        service_data = _section(data, "service")
        job_data = dict(_section(data, "job"))
        report_data = data.get("report") or {}

        if "run_time" in job_data:
            job_data["run_time"] = parse_duration(job_data["run_time"])
        if job_data.get("num_jobs") is None:
            job_data.pop("num_jobs", None)

        try:
            return cls(
                service=ServiceConfig(**service_data),
                job=JobConfig(**job_data),
                report=ReportConfig(**report_data),
            )
        except TypeError as e:
            raise ConfigError(f"invalid job file: {e}") from e

    def validate(self) -> None:
        """Check bounds and enumerations.

        Raises:
            ConfigError: On the first invalid setting
        """
        if self.service.type not in SUPPORTED_SERVICES:
            raise ConfigError(f"invalid service: {self.service.type}")
        if self.service.type != "fs" and not self.service.bucket:
            raise ConfigError(f"bucket is required for service {self.service.type}")
        if self.job.workload not in SUPPORTED_WORKLOADS:
            raise ConfigError(f"invalid workload: {self.job.workload}")
        if not isinstance(self.job.file_size, int) or self.job.file_size < MIN_FILE_SIZE:
            raise ConfigError(f"file_size must be greater or equal to {MIN_FILE_SIZE}")
        if not isinstance(self.job.num_jobs, int) or self.job.num_jobs < 1:
            raise ConfigError("num_jobs must be at least 1")
        if not math.isfinite(self.job.run_time) or self.job.run_time <= 0:
            raise ConfigError("run_time must be positive")

    def to_dict(self, redact_secrets: bool = True) -> Dict[str, Any]:
        data = asdict(self)
        if redact_secrets:
            for name in ("access_key", "secret_key"):
                if data["service"][name]:
                    data["service"][name] = "***"
        return data


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name)
    if not isinstance(section, dict):
        raise ConfigError(f"missing [{name}] section")
    return section


def load_config(path: Union[str, Path]) -> Config:
    """Load and validate a YAML job file.

    Raises:
        ConfigError: If the file is unreadable, malformed or invalid
    """
    config_path = Path(path)
    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read job file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"cannot parse job file {config_path}: {e}") from e

    config = Config.from_dict(data)
    config.validate()
    logger.info(f"Loaded job file {config_path}")
    return config
