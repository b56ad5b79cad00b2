"""
oio-bench: micro-benchmark for object storage read/write workloads.
"""

__version__ = "0.1.0"
