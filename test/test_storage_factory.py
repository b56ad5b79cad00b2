"""
Tests for storage system creation from the service section of a job file.
"""

import os
import sys
import unittest

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from oiobench.config import ServiceConfig
from oiobench.configuration import DEFAULT_FS_ROOT, DEFAULT_REGION
from oiobench.common.storage_factory import create_storage_system
from oiobench.systems.fs import FsSystem
from oiobench.systems.s3 import S3System, MinioSystem, OssSystem


class TestStorageFactory(unittest.TestCase):

    def test_fs_uses_prefix_as_root(self):
        storage = create_storage_system(ServiceConfig(type="fs", prefix="/tmp/bench-root"))

        self.assertIsInstance(storage, FsSystem)
        self.assertEqual(storage.root, "/tmp/bench-root")

    def test_fs_default_root(self):
        storage = create_storage_system(ServiceConfig(type="fs"))

        self.assertEqual(storage.root, DEFAULT_FS_ROOT)

    def test_s3_compatible_types(self):
        cases = [("s3", S3System), ("minio", MinioSystem), ("oss", OssSystem)]
        for service_type, expected in cases:
            with self.subTest(service_type=service_type):
                service = ServiceConfig(
                    type=service_type,
                    bucket="bench",
                    endpoint="http://localhost:9000",
                    prefix="runs/",
                    access_key="id",
                    secret_key="secret",
                )
                storage = create_storage_system(service, max_connections=4)

                self.assertIs(type(storage), expected)
                self.assertEqual(storage.bucket_name, "bench")
                self.assertEqual(storage.object_path("k"), "runs/k")
                self.assertEqual(storage.credentials["region_name"], DEFAULT_REGION)
                self.assertEqual(storage.max_connections, 4)

    def test_region_override(self):
        service = ServiceConfig(type="s3", bucket="bench", region="eu-west-1")

        storage = create_storage_system(service)

        self.assertEqual(storage.credentials["region_name"], "eu-west-1")

    def test_unsupported_type(self):
        with self.assertRaises(ValueError):
            create_storage_system(ServiceConfig(type="gcs", bucket="bench"))


if __name__ == '__main__':
    unittest.main()
