"""
The fixed unit of work every worker repeats during a run.
"""

import uuid
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from oiobench.configuration import FILLER_BYTE, OBJECT_KEY_PREFIX
from oiobench.common.errors import JobError, StagingError
from oiobench.common.retry import RetryPolicy, NO_RETRY
from oiobench.systems.base import ObjectStorageSystem

logger = logging.getLogger(__name__)

DOWNLOAD = "download"
UPLOAD = "upload"


def generate_object_key() -> str:
    """Process-unique object key so concurrent runs never collide."""
    return f"{OBJECT_KEY_PREFIX}{uuid.uuid4()}"


def make_payload(file_size: int) -> bytes:
    return bytes([FILLER_BYTE]) * file_size


@dataclass(frozen=True)
class Task:
    """Immutable workload description shared read-only by every worker.

    A download task reads back one staged object. An upload task writes its
    in-memory payload once per iteration; each worker writes its own key
    (``<key>-<worker_id>``) so workers never overwrite each other's object.
    """

    workload: str
    key: str
    file_size: int
    payload: Optional[bytes] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if self.workload not in (DOWNLOAD, UPLOAD):
            raise ValueError(f"invalid workload: {self.workload}")
        if self.workload == UPLOAD and self.payload is None:
            raise ValueError("upload task needs a payload")

    def key_for(self, worker_id: int) -> str:
        if self.workload == UPLOAD:
            return f"{self.key}-{worker_id}"
        return self.key

    def keys(self, num_workers: int) -> List[str]:
        """Every object key a run with ``num_workers`` workers may create."""
        if self.workload == UPLOAD:
            return [self.key_for(worker_id) for worker_id in range(num_workers)]
        return [self.key]

    async def run(
        self,
        storage: ObjectStorageSystem,
        worker_id: int = 0,
        retry: RetryPolicy = NO_RETRY,
    ) -> int:
        """Run the operation once and return the number of bytes moved.

        Raises:
            JobError: If the storage operation fails
        """
        key = self.key_for(worker_id)
        try:
            if self.workload == DOWNLOAD:
                return await retry.call(lambda: storage.read(key), f"download of {key}")
            return await retry.call(lambda: storage.write(key, self.payload), f"upload of {key}")
        except Exception as e:
            raise JobError(f"failed to {self.workload} object: {key}") from e


async def prepare_task(
    storage: ObjectStorageSystem,
    workload: str,
    file_size: int,
    retry: RetryPolicy = NO_RETRY,
) -> Task:
    """Build the task for a run, staging the download object if needed.

    Raises:
        StagingError: If the staging write fails; no worker has started yet
    """
    key = generate_object_key()
    payload = make_payload(file_size)

    if workload == UPLOAD:
        logger.info(f"Prepared upload task: {file_size} bytes per write, key prefix {key}")
        return Task(workload=UPLOAD, key=key, file_size=file_size, payload=payload)

    if workload != DOWNLOAD:
        raise ValueError(f"invalid workload: {workload}")

    logger.info(f"Staging {file_size} bytes at {key} for download workload")
    try:
        written = await retry.call(lambda: storage.write(key, payload), f"staging of {key}")
    except Exception as e:
        raise StagingError(f"failed to prepare download object: {key}") from e

    if written != file_size:
        logger.warning(f"Staged {written} bytes at {key}, expected {file_size}")
    return Task(workload=DOWNLOAD, key=key, file_size=file_size)
