"""
Async worker pool that runs the timed measurement loop.
"""

import asyncio
import time
import logging
from typing import List

from oiobench.configuration import PROGRESS_INTERVAL, MS_PER_SECOND
from oiobench.common.retry import RetryPolicy, NO_RETRY
from oiobench.common.sample import Measurement
from oiobench.common.task import Task
from oiobench.systems.base import ObjectStorageSystem

logger = logging.getLogger(__name__)

# Timer resolution floor so bandwidth = bytes / latency is always defined
MIN_LATENCY_SECONDS: float = 1e-9


class WorkerPool:
    """Fans one task out over a fixed number of worker coroutines.

    Every worker owns its samples; nothing is shared while the clock runs.
    Workers check the deadline only between operations, so each of them can
    overrun the run time by at most one operation's latency.
    """

    def __init__(
        self,
        storage_system: ObjectStorageSystem,
        num_workers: int,
        retry_policy: RetryPolicy = NO_RETRY,
    ):
        """Initialize the worker pool.

        Args:
            storage_system: Storage system shared by all workers (already entered)
            num_workers: Number of concurrent workers, at least 1
            retry_policy: Per-operation retry policy (default: no retries)
        """
        if num_workers < 1:
            raise ValueError("num_workers must be at least 1")
        self.storage_system = storage_system
        self.num_workers = num_workers
        self.retry_policy = retry_policy

        self.worker_tasks: List[asyncio.Task] = []
        self.is_running = False

        logger.info(f"Initialized WorkerPool with {num_workers} workers")

    async def run(self, task: Task, run_time: float, start: float = None) -> List[Measurement]:
        """Run every worker until the deadline and return their measurements.

        Args:
            task: Task every worker repeats
            run_time: Run duration in seconds, measured from ``start``
            start: Shared start instant on the ``time.perf_counter`` clock (default: now)

        Returns:
            One Measurement per worker, in worker order

        Raises:
            JobError: The first worker failure; the other workers are cancelled
        """
        if self.is_running:
            raise RuntimeError("WorkerPool is already running")
        if start is None:
            start = time.perf_counter()

        self.is_running = True
        self.worker_tasks = [
            asyncio.create_task(self._worker_task(worker_id, task, start, run_time))
            for worker_id in range(self.num_workers)
        ]
        logger.info(f"Started {self.num_workers} workers for {run_time:.3f}s of {task.workload}")

        try:
            return list(await asyncio.gather(*self.worker_tasks))
        except BaseException:
            await self.stop_workers()
            raise
        finally:
            self.worker_tasks = []
            self.is_running = False

    async def _worker_task(
        self, worker_id: int, task: Task, start: float, run_time: float
    ) -> Measurement:
        """Timed loop of a single worker."""
        measurement = Measurement()
        count = 0

        while True:
            if time.perf_counter() - start >= run_time:
                break

            op_start = time.perf_counter()
            transferred = await task.run(self.storage_system, worker_id, self.retry_policy)
            now = time.perf_counter()
            latency = max(now - op_start, MIN_LATENCY_SECONDS)
            count += 1

            measurement.latency.add(latency * MS_PER_SECOND)
            measurement.bandwidth.add(transferred / latency)
            measurement.iops.add(count / max(now - start, MIN_LATENCY_SECONDS))

            if count % PROGRESS_INTERVAL == 0:
                logger.debug(f"Worker {worker_id}: {count} requests completed")

        logger.debug(f"Worker {worker_id} finished after {count} requests")
        return measurement

    async def stop_workers(self) -> None:
        """Cancel workers that are still running and wait for them."""
        pending = [t for t in self.worker_tasks if not t.done()]
        if not pending:
            return
        logger.info(f"Stopping {len(pending)} remaining workers...")
        for worker in pending:
            worker.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
