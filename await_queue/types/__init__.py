"""
Type definitions for the sequencer.
"""

from await_queue.types.job import (
    AsyncFn,
    Job,
    JobAddedEventListener,
    JobEmptyEventListener,
    JobErrorHandlingMiddleware,
)

__all__ = [
    "AsyncFn",
    "Job",
    "JobAddedEventListener",
    "JobEmptyEventListener",
    "JobErrorHandlingMiddleware",
]
