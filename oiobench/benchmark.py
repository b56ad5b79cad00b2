"""
Benchmark runner: one timed run of a fixed workload across parallel workers.
"""

import asyncio
import time
import logging
from contextlib import AsyncExitStack
from functools import reduce
from typing import List, Optional

from oiobench.config import Config
from oiobench.common.errors import JobError, StagingError
from oiobench.common.retry import RetryPolicy, NO_RETRY
from oiobench.common.sample import Measurement
from oiobench.common.storage_factory import create_storage_system
from oiobench.common.task import Task, prepare_task
from oiobench.common.worker_pool import WorkerPool
from oiobench.systems.base import ObjectStorageSystem

logger = logging.getLogger(__name__)


class BenchmarkRunner:
    """Builds the task once, runs the worker pool, merges the results."""

    def __init__(
        self,
        config: Config,
        storage_system: Optional[ObjectStorageSystem] = None,
        retry_policy: RetryPolicy = NO_RETRY,
    ):
        self.config = config
        self.num_jobs = config.job.num_jobs
        self.retry_policy = retry_policy
        self.storage_system = storage_system or create_storage_system(
            config.service, max_connections=self.num_jobs
        )
        self.task: Optional[Task] = None
        self.worker_measurements: List[Measurement] = []
        self.elapsed_seconds: float = 0.0

        logger.info(
            f"Initialized benchmark runner: {config.job.workload} of {config.job.file_size} bytes "
            f"with {self.num_jobs} workers for {config.job.run_time:.3f}s on {config.service.type}"
        )

    async def run_benchmark(self) -> Measurement:
        """Execute the run and return the merged measurement.

        Raises:
            JobError: If the storage backend cannot be opened, or any worker failed;
                no partial results are returned
            StagingError: If the backend is unreachable or the download object
                could not be staged
        """
        job = self.config.job

        # Storage transport is released on exit whatever happens
        async with AsyncExitStack() as stack:
            try:
                await stack.enter_async_context(self.storage_system)
            except Exception as e:
                raise JobError(f"failed to open {self.config.service.type} storage") from e

            await self._verify_storage()
            self.task = await prepare_task(
                self.storage_system, job.workload, job.file_size, self.retry_policy
            )
            try:
                worker_pool = WorkerPool(self.storage_system, self.num_jobs, self.retry_policy)
                start = time.perf_counter()
                self.worker_measurements = await worker_pool.run(self.task, job.run_time, start)
                self.elapsed_seconds = time.perf_counter() - start
            finally:
                if job.cleanup:
                    await self._cleanup(self.task)

        measurement = reduce(Measurement.merge, self.worker_measurements)
        logger.info(
            f"Run completed: {measurement.iterations} operations from {self.num_jobs} workers "
            f"in {self.elapsed_seconds:.3f}s"
        )
        return measurement

    async def _verify_storage(self) -> None:
        """Fail before staging anything when the backend is not usable."""
        try:
            reachable = await self.storage_system.verify_connection()
        except Exception as e:
            raise StagingError(f"storage is not reachable: {self.storage_system!r}") from e
        if not reachable:
            raise StagingError(f"storage is not reachable: {self.storage_system!r}")

    async def _cleanup(self, task: Task) -> None:
        """Delete every object the run created; failures are only logged."""
        keys = task.keys(self.num_jobs)
        failed = 0
        for key in keys:
            try:
                await self.storage_system.delete(key)
            except Exception as e:
                failed += 1
                logger.warning(f"Failed to clean up object {key}: {e}")
        if failed:
            logger.warning(f"Cleanup left {failed} of {len(keys)} objects for {task.key}")
        else:
            logger.info(f"Cleaned up {len(keys)} objects for {task.key}")

    def run(self) -> Measurement:
        """Synchronous entry point around ``run_benchmark``."""
        return asyncio.run(self.run_benchmark())


__all__ = ['BenchmarkRunner', 'JobError']
