"""
In-memory storage systems used by the tests.
"""

import asyncio
import os
import sys

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from oiobench.systems.base import ObjectStorageSystem


class StorageFailure(OSError):
    """Injected backend failure."""


class InstantStorage(ObjectStorageSystem):
    """Dict-backed storage whose operations complete immediately.

    Every call still yields to the event loop once, like a real network call
    would, so concurrent workers interleave.

    Args:
        fail_read_on: 1-based read call number that raises StorageFailure
        fail_write_on: 1-based write call number that raises StorageFailure
        delay: Seconds each read/write takes
        reachable: Result of verify_connection
        fail_delete: Every delete raises StorageFailure
        fail_enter: Entering the context raises StorageFailure
    """

    service_type = "memory"

    def __init__(self, fail_read_on: int = None, fail_write_on: int = None, delay: float = 0.0,
                 reachable: bool = True, fail_delete: bool = False, fail_enter: bool = False):
        super().__init__()
        self.reachable = reachable
        self.fail_delete = fail_delete
        self.fail_enter = fail_enter
        self.objects = {}
        self.reads = 0
        self.writes = 0
        self.deleted = []
        self.fail_read_on = fail_read_on
        self.fail_write_on = fail_write_on
        self.delay = delay
        self.entered = False
        self.exited = False

    async def __aenter__(self):
        if self.fail_enter:
            raise StorageFailure("transport unavailable")
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.exited = True

    async def read(self, key: str) -> int:
        self.reads += 1
        if self.fail_read_on is not None and self.reads >= self.fail_read_on:
            raise StorageFailure(f"read #{self.reads} of {key} failed")
        await asyncio.sleep(self.delay)
        return len(self.objects[key])

    async def write(self, key: str, payload: bytes) -> int:
        self.writes += 1
        if self.fail_write_on is not None and self.writes >= self.fail_write_on:
            raise StorageFailure(f"write #{self.writes} of {key} failed")
        await asyncio.sleep(self.delay)
        self.objects[key] = payload
        return len(payload)

    async def delete(self, key: str) -> None:
        if self.fail_delete:
            raise StorageFailure(f"delete of {key} failed")
        self.deleted.append(key)
        self.objects.pop(key, None)

    async def verify_connection(self) -> bool:
        return self.reachable


class FlakyStorage(InstantStorage):
    """Fails the first ``failures`` reads, then succeeds."""

    def __init__(self, failures: int):
        super().__init__()
        self.failures = failures

    async def read(self, key: str) -> int:
        self.reads += 1
        if self.reads <= self.failures:
            raise StorageFailure(f"read #{self.reads} of {key} failed")
        return len(self.objects[key])
