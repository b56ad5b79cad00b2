"""
Common building blocks of the benchmark core.
"""

from .sample import SampleSet, Measurement
from .task import Task
from .worker_pool import WorkerPool

__all__ = ['SampleSet', 'Measurement', 'Task', 'WorkerPool']
