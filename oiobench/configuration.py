"""
Configuration constants for the object storage benchmark.

This module contains all configuration parameters including:
- Default credentials pulled from the environment
- Workload parameters (object sizes, payload filler, key naming)
- Storage client settings (timeouts, multipart thresholds)
- Unit conversion factors used by the report
"""

import os

# =============================================================================
# CLOUD STORAGE CONFIGURATION
# =============================================================================

# Fallback credentials when the job file leaves them empty
ACCESS_KEY_ENV: str = "OIO_ACCESS_KEY"
SECRET_KEY_ENV: str = "OIO_SECRET_KEY"
DEFAULT_ACCESS_KEY: str = os.getenv(ACCESS_KEY_ENV, "")
DEFAULT_SECRET_KEY: str = os.getenv(SECRET_KEY_ENV, "")

DEFAULT_REGION: str = "us-east-1"

# Root directory used by the local filesystem backend when no prefix is given
DEFAULT_FS_ROOT: str = "/tmp/oio"

SUPPORTED_SERVICES = ("s3", "oss", "minio", "fs")
SUPPORTED_WORKLOADS = ("download", "upload")

# =============================================================================
# WORKLOAD PARAMETERS
# =============================================================================

MIN_FILE_SIZE: int = 4096  # Smallest object the benchmark accepts, in bytes
FILLER_BYTE: int = 0xFE  # Payload content is irrelevant to the measurement
OBJECT_KEY_PREFIX: str = "oio-test-"
DEFAULT_NUM_JOBS: int = 1
PROGRESS_INTERVAL: int = 1000  # Log worker progress every N requests

# =============================================================================
# STORAGE CLIENT SETTINGS
# =============================================================================

CONNECT_TIMEOUT_SECONDS: int = 5
READ_TIMEOUT_SECONDS: int = 60
POOL_CONNECTIONS_HEADROOM: int = 10  # Extra pooled connections beyond one per worker

# S3 requires every part but the last to be at least 5 MiB
MULTIPART_PART_SIZE: int = 8 * 1024 * 1024

# =============================================================================
# RETRY DEFAULTS
# =============================================================================

DEFAULT_MAX_ATTEMPTS: int = 1  # No retries unless a policy asks for them
DEFAULT_BACKOFF_SECONDS: float = 0.1
DEFAULT_MAX_BACKOFF_SECONDS: float = 5.0

# =============================================================================
# UNIT CONVERSIONS
# =============================================================================

BYTES_PER_MB: int = 1024 * 1024
MS_PER_SECOND: float = 1000.0
SECONDS_PER_MINUTE: int = 60
SECONDS_PER_HOUR: int = 3600

# =============================================================================
# REPORT
# =============================================================================

REPORT_PERCENTILES = (99.0, 95.0, 50.0)
REPORT_FORMATS = ("text", "json", "table")
DEFAULT_REPORT_FORMAT: str = "text"
