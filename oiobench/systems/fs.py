"""
Local filesystem storage system, useful for dry runs and disk benchmarks.
"""

import asyncio
import logging
import os

from oiobench.configuration import DEFAULT_FS_ROOT
from oiobench.systems.base import ObjectStorageSystem

logger = logging.getLogger(__name__)


class FsSystem(ObjectStorageSystem):
    """Stores each object as a file below a root directory.

    Blocking file I/O runs in the event loop's default executor; every call
    opens its own file handle so concurrent workers never share one.
    """

    service_type = "fs"

    def __init__(self, root: str = None):
        super().__init__(prefix="")
        self.root = root or DEFAULT_FS_ROOT
        logger.info(f"Initialized filesystem storage at {self.root}")

    async def __aenter__(self):
        os.makedirs(self.root, exist_ok=True)
        return self

    def object_path(self, key: str) -> str:
        return os.path.join(self.root, key)

    async def read(self, key: str) -> int:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read_file, self.object_path(key))

    async def write(self, key: str, payload: bytes) -> int:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._write_file, self.object_path(key), payload)

    async def delete(self, key: str) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._remove_file, self.object_path(key))

    async def verify_connection(self) -> bool:
        return os.path.isdir(self.root) and os.access(self.root, os.W_OK)

    @staticmethod
    def _read_file(path: str) -> int:
        with open(path, "rb") as f:
            return len(f.read())

    @staticmethod
    def _write_file(path: str, payload: bytes) -> int:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "wb") as f:
            return f.write(payload)

    @staticmethod
    def _remove_file(path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.debug(f"{path} already removed")

    def __repr__(self) -> str:
        return f"FsSystem(root='{self.root}')"
