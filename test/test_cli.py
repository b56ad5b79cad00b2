"""
Tests for the oio-bench command line.
"""

import io
import json
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stdout

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from oiobench.cli import BenchmarkCLI


class TestBenchmarkCLI(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = os.path.join(self._tmp.name, "objects")
        self.cli = BenchmarkCLI()

    def tearDown(self):
        self._tmp.cleanup()

    def write_job(self, body: str) -> str:
        path = os.path.join(self._tmp.name, "job.yaml")
        with open(path, "w") as f:
            f.write(body)
        return path

    def fs_job(self, workload="upload") -> str:
        return self.write_job(
            "service:\n"
            "  type: fs\n"
            f"  prefix: {self.root}\n"
            "job:\n"
            "  num_jobs: 2\n"
            "  run_time: 100ms\n"
            "  file_size: 4096\n"
            f"  workload: {workload}\n"
        )

    def test_no_command(self):
        with redirect_stdout(io.StringIO()):
            self.assertEqual(self.cli.run([]), 1)

    def test_validate(self):
        self.assertEqual(self.cli.run(["validate", self.fs_job()]), 0)

    def test_validate_invalid_job(self):
        path = self.write_job("service:\n  type: fs\njob:\n  workload: upload\n  file_size: 10\n  run_time: 1s\n")

        self.assertEqual(self.cli.run(["validate", path]), 1)

    def test_run_prints_text_report(self):
        out = io.StringIO()
        with redirect_stdout(out):
            code = self.cli.run(["run", self.fs_job("download")])

        self.assertEqual(code, 0)
        text = out.getvalue()
        self.assertIn("Workload: download", text)
        self.assertIn("Bandwidth:", text)
        self.assertIn("Latency:", text)
        self.assertEqual(os.listdir(self.root), [])

    def test_run_prints_json_report(self):
        out = io.StringIO()
        with redirect_stdout(out):
            code = self.cli.run(["run", self.fs_job(), "--format", "json"])

        self.assertEqual(code, 0)
        data = json.loads(out.getvalue())
        self.assertEqual(data["num_jobs"], 2)
        self.assertGreaterEqual(data["latency"]["num_samples"], 2)

    def test_run_prints_table_report(self):
        out = io.StringIO()
        with redirect_stdout(out):
            code = self.cli.run(["run", self.fs_job(), "--format", "table"])

        self.assertEqual(code, 0)
        lines = out.getvalue().splitlines()
        self.assertIn("p50", lines[0])
        self.assertTrue(any(line.startswith("latency") for line in lines))

    def test_run_storage_cannot_be_opened(self):
        blocker = os.path.join(self._tmp.name, "regular-file")
        with open(blocker, "w") as f:
            f.write("not a directory")
        self.root = os.path.join(blocker, "sub")

        out = io.StringIO()
        with redirect_stdout(out):
            code = self.cli.run(["run", self.fs_job()])

        self.assertEqual(code, 1)
        self.assertEqual(out.getvalue(), "")

    def test_run_missing_job_file(self):
        self.assertEqual(self.cli.run(["run", os.path.join(self._tmp.name, "missing.yaml")]), 1)


if __name__ == '__main__':
    unittest.main()
