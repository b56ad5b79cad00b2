"""
Errors raised by the benchmark core.
"""


class JobError(RuntimeError):
    """A benchmark run failed; the message names the object key and workload."""


class StagingError(JobError):
    """The one-time write that stages the download object failed."""
