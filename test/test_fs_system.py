"""
Tests for the local filesystem storage system.
"""

import os
import sys
import tempfile
import unittest

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from oiobench.systems.fs import FsSystem


class TestFsSystem(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = os.path.join(self._tmp.name, "oio")
        self.storage = FsSystem(self.root)

    async def asyncTearDown(self):
        self._tmp.cleanup()

    async def test_enter_creates_root(self):
        async with self.storage:
            self.assertTrue(os.path.isdir(self.root))
            self.assertTrue(await self.storage.verify_connection())

    async def test_write_then_read(self):
        async with self.storage:
            written = await self.storage.write("oio-test-a", b"\xfe" * 5000)
            read = await self.storage.read("oio-test-a")

        self.assertEqual(written, 5000)
        self.assertEqual(read, 5000)
        self.assertEqual(os.path.getsize(os.path.join(self.root, "oio-test-a")), 5000)

    async def test_overwrite_replaces_content(self):
        async with self.storage:
            await self.storage.write("oio-test-a", b"x" * 8192)
            await self.storage.write("oio-test-a", b"y" * 4096)

            self.assertEqual(await self.storage.read("oio-test-a"), 4096)

    async def test_nested_keys(self):
        async with self.storage:
            await self.storage.write("nested/dir/oio-test-b", b"z" * 4096)

            self.assertEqual(await self.storage.read("nested/dir/oio-test-b"), 4096)

    async def test_read_missing_object_raises(self):
        async with self.storage:
            with self.assertRaises(FileNotFoundError):
                await self.storage.read("missing")

    async def test_delete(self):
        async with self.storage:
            await self.storage.write("oio-test-c", b"x" * 4096)
            await self.storage.delete("oio-test-c")
            # Deleting twice is not an error
            await self.storage.delete("oio-test-c")

            self.assertFalse(os.path.exists(os.path.join(self.root, "oio-test-c")))

    def test_default_root(self):
        self.assertEqual(FsSystem().root, "/tmp/oio")


if __name__ == '__main__':
    unittest.main()
