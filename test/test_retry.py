"""
Tests for the opt-in retry policy.
"""

import os
import sys
import unittest

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from oiobench.common.errors import JobError
from oiobench.common.retry import RetryPolicy, NO_RETRY
from oiobench.common.task import DOWNLOAD, prepare_task
from storage_fakes import FlakyStorage, StorageFailure


class TestRetryPolicy(unittest.IsolatedAsyncioTestCase):

    def test_default_policy_does_not_retry(self):
        self.assertEqual(NO_RETRY.max_attempts, 1)

    def test_invalid_attempts(self):
        with self.assertRaises(ValueError):
            RetryPolicy(max_attempts=0)

    def test_backoff_is_exponential_and_capped(self):
        policy = RetryPolicy(max_attempts=5, backoff_seconds=0.5, max_backoff_seconds=1.5)

        self.assertEqual(policy.backoff(1), 0.5)
        self.assertEqual(policy.backoff(2), 1.0)
        self.assertEqual(policy.backoff(3), 1.5)
        self.assertEqual(policy.backoff(10), 1.5)

    async def test_no_retry_propagates_first_failure(self):
        storage = FlakyStorage(failures=1)
        task = await prepare_task(storage, DOWNLOAD, 4096)

        with self.assertRaises(JobError):
            await task.run(storage)
        self.assertEqual(storage.reads, 1)

    async def test_retry_recovers(self):
        storage = FlakyStorage(failures=2)
        task = await prepare_task(storage, DOWNLOAD, 4096)
        policy = RetryPolicy(max_attempts=3, backoff_seconds=0.0)

        self.assertEqual(await task.run(storage, retry=policy), 4096)
        self.assertEqual(storage.reads, 3)

    async def test_retry_gives_up_after_max_attempts(self):
        storage = FlakyStorage(failures=5)
        task = await prepare_task(storage, DOWNLOAD, 4096)
        policy = RetryPolicy(max_attempts=2, backoff_seconds=0.0)

        with self.assertRaises(JobError) as ctx:
            await task.run(storage, retry=policy)
        self.assertIsInstance(ctx.exception.__cause__, StorageFailure)
        self.assertEqual(storage.reads, 2)


if __name__ == '__main__':
    unittest.main()
