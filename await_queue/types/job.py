"""
Job-related type definitions for internal use.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar
from uuid import UUID, uuid4

T = TypeVar("T")

# Zero-argument callable producing the job's awaitable
AsyncFn = Callable[[], Awaitable[T]]

JobAddedEventListener = Callable[[int], Any]
JobEmptyEventListener = Callable[[], Any]

# Returns to accept the error and retry the job, raises to give up on it
JobErrorHandlingMiddleware = Callable[[Exception, int], Any]


@dataclass(eq=False)
class Job(Generic[T]):
    """
    One pending unit of work.

    Owned by the sequencer's queue until removed. ``resolve``/``reject``
    settle the caller's future at most once.
    """

    fn: AsyncFn[T]
    future: asyncio.Future
    job_id: UUID = field(default_factory=uuid4)
    submitted_at: float = field(default_factory=time.monotonic)

    def resolve(self, result: T) -> bool:
        """
        Deliver a successful result.

        Returns:
            True if this call settled the future.
        """
        if self.future.done():
            return False
        self.future.set_result(result)
        return True

    def reject(self, error: BaseException) -> bool:
        """
        Deliver a failure.

        Returns:
            True if this call settled the future.
        """
        if self.future.done():
            return False
        self.future.set_exception(error)
        return True
