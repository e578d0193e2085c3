"""
Await Queue

A single-concurrency asynchronous job sequencer: jobs are awaited one at a
time in submission order, with pause/resume, skip/clear and a replaceable
error-handling middleware deciding between retry and abandon.
"""

from await_queue.errors import (
    AwaitQueueError,
    JobCanceledError,
    JobRetriesExhaustedError,
)
from await_queue.middleware import (
    default_error_handling_middleware,
    ignore_errors,
    retry_middleware,
)
from await_queue.sequencer import AwaitQueue

__version__ = "1.0.0"

__all__ = [
    "AwaitQueue",
    "AwaitQueueError",
    "JobCanceledError",
    "JobRetriesExhaustedError",
    "default_error_handling_middleware",
    "ignore_errors",
    "retry_middleware",
]
