"""
Single-concurrency job sequencer.

Jobs are submitted as zero-argument async callables and executed one at a
time, head of the queue first. A failed head job is handed to the
error-handling middleware, which either accepts the error (the job stays at
the head and is retried on the next drive cycle) or raises (the job is
rejected with the raised error and removed).
"""

import asyncio
import inspect
import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar

from await_queue.config import Settings, get_settings
from await_queue.constants import SPAN_EXECUTE_JOB, JobOutcome, SequencerState
from await_queue.errors import JobCanceledError
from await_queue.middleware import default_error_handling_middleware
from await_queue.observability.metrics import MetricsCollector, get_metrics
from await_queue.observability.tracing import get_tracer
from await_queue.types.job import (
    AsyncFn,
    Job,
    JobAddedEventListener,
    JobEmptyEventListener,
    JobErrorHandlingMiddleware,
)
from await_queue.utils.queue import Queue

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AwaitQueue:
    """
    Sequencer executing submitted jobs strictly one at a time, in FIFO order.

    Features:
    - ``submit`` returns a future settled exactly once with the job's outcome
    - ``pause``/``run`` gate admission of drive cycles without interrupting
      the job in flight
    - ``skip``/``clear`` reject pending jobs with JobCanceledError; the
      outcome of a job removed while in flight is discarded
    - replaceable error-handling middleware deciding retry vs. abandon

    All bookkeeping runs synchronously on the event loop thread; the only
    suspension point is the await on the head job's awaitable.
    """

    def __init__(
        self,
        name: str | None = None,
        settings: Settings | None = None,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize the sequencer.

        Args:
            name: Name used in logs and metric labels. Defaults to settings.
            settings: Settings override. Defaults to the cached settings.
            metrics: Metrics collector. Defaults to the global collector
                when metrics are enabled.
        """
        settings = settings or get_settings()

        self.name = name or settings.queue_name

        if metrics is None and settings.metrics_enabled:
            metrics = get_metrics()
        self._metrics = metrics
        self._tracer = get_tracer()

        self._queue: Queue[Job] = Queue(listener_error_hook=self._on_listener_error)
        self._state = (
            SequencerState.PAUSED if settings.queue_start_paused else SequencerState.IDLE
        )
        self._processing_job_error_count = 0
        self._error_handling_middleware: JobErrorHandlingMiddleware = (
            default_error_handling_middleware
        )
        self._drive_task: asyncio.Task | None = None

    def __len__(self) -> int:
        return self._queue.size()

    def __repr__(self) -> str:
        return f"<AwaitQueue name={self.name!r} state={self._state.value} size={self._queue.size()}>"

    @property
    def state(self) -> SequencerState:
        return self._state

    @property
    def is_processing(self) -> bool:
        return self._state.is_processing

    @property
    def is_paused(self) -> bool:
        return self._state.is_paused

    @property
    def processing_job_error_count(self) -> int:
        """Consecutive failures of the current head job."""
        return self._processing_job_error_count

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def submit(self, fn: AsyncFn[T]) -> "asyncio.Future[T]":
        """
        Enqueue a job and return the future of its result.

        The job starts right away if the sequencer is running and idle.
        Must be called from a running event loop.

        Args:
            fn: Zero-argument callable returning an awaitable.

        Returns:
            Future resolved with the job's result, or rejected with
            JobCanceledError or the error raised by the middleware.
        """
        future = asyncio.get_running_loop().create_future()
        job = Job(fn=fn, future=future)

        logger.debug(
            "Job submitted",
            extra={"queue": self.name, "job_id": str(job.job_id)},
        )

        if self._metrics is not None:
            self._metrics.record_job_submitted(self.name)

        self._queue.push(job)
        self._update_queue_depth()

        self._drive()

        return future

    def run(self) -> None:
        """
        Resume admission and start a drive cycle.

        If a job is in flight no second cycle is started; the running cycle
        carries on once the job finishes.
        """
        if self._state.is_processing:
            self._state = SequencerState.PROCESSING
            return

        self._state = SequencerState.IDLE
        self._drive()

    def pause(self) -> None:
        """
        Stop admitting drive cycles.

        A job already in flight finishes; the next one is not started.
        """
        if self._state.is_processing:
            self._state = SequencerState.PAUSING
        else:
            self._state = SequencerState.PAUSED

    def skip(self, amount: int = 1) -> None:
        """
        Cancel up to ``amount`` jobs from the front of the queue.

        Each removed job's future is rejected with JobCanceledError, front
        first. Skipping more jobs than are queued skips all of them.

        Raises:
            ValueError: If amount is negative.
        """
        if amount < 0:
            raise ValueError(f"amount must be >= 0, got {amount}")

        jobs = self._queue.items(amount)
        if not jobs:
            return

        for job in jobs:
            job.reject(JobCanceledError())
            logger.debug(
                "Job skipped",
                extra={"queue": self.name, "job_id": str(job.job_id)},
            )

        # the head is always among the removed jobs
        self._processing_job_error_count = 0
        self._remove_jobs(len(jobs), JobOutcome.CANCELED)

    def clear(self) -> None:
        """Cancel every queued job."""
        self.skip(self._queue.size())

    def cleanup(self) -> None:
        """Pause, cancel every queued job and drop all listeners."""
        self.pause()
        self.clear()
        self._queue.cleanup()

        logger.info("Queue cleaned up", extra={"queue": self.name})

    def use_error_handling_middleware(
        self, fn: JobErrorHandlingMiddleware | None
    ) -> None:
        """
        Replace the error-handling middleware.

        Args:
            fn: Called as ``fn(error, times)`` for each failure of the head
                job. Return to retry, raise to reject the job with the
                raised error. None restores the default, which re-raises.
                Must be a plain function: the decision is made synchronously.

        Raises:
            TypeError: If fn is not callable or is a coroutine function.
        """
        if fn is None:
            fn = default_error_handling_middleware
        elif not callable(fn):
            raise TypeError(f"Middleware must be callable, got {type(fn).__name__}")
        elif inspect.iscoroutinefunction(fn):
            raise TypeError("Middleware must be a plain function, not a coroutine function")

        self._error_handling_middleware = fn

    def on_added(self, listener: JobAddedEventListener) -> Callable[[], None]:
        """Listen for submissions. The listener receives the new queue size."""
        return self._queue.on_added(listener)

    def on_empty(self, listener: JobEmptyEventListener) -> Callable[[], None]:
        """Listen for the queue becoming empty."""
        return self._queue.on_empty(listener)

    def size(self) -> int:
        return self._queue.size()

    # ------------------------------------------------------------------
    # Drive loop
    # ------------------------------------------------------------------

    def _drive(self) -> None:
        if self._state is not SequencerState.IDLE or not self._queue:
            return

        self._drive_task = asyncio.get_running_loop().create_task(
            self._main(), name=f"await-queue:{self.name}"
        )
        self._state = SequencerState.PROCESSING

    async def _main(self) -> None:
        try:
            while True:
                await self._process_job()

                # let pause/skip calls scheduled meanwhile run before the next job
                await asyncio.sleep(0)

                if self._state.is_paused or not self._queue:
                    break
        finally:
            self._state = (
                SequencerState.PAUSED if self._state.is_paused else SequencerState.IDLE
            )
            self._drive_task = None

    async def _process_job(self) -> None:
        job = self._queue.head()
        if job is None:
            return

        attempt = self._processing_job_error_count + 1
        caught_error: BaseException | None = None
        result: Any = None

        logger.debug(
            "Executing job",
            extra={"queue": self.name, "job_id": str(job.job_id), "attempt": attempt},
        )

        with self._tracer.start_as_current_span(SPAN_EXECUTE_JOB) as span:
            span.set_attribute("queue", self.name)
            span.set_attribute("job_id", str(job.job_id))
            span.set_attribute("attempt", attempt)

            try:
                result = await job.fn()
            except asyncio.CancelledError as error:
                # only a cancellation of the drive task itself stops the loop
                if asyncio.current_task().cancelling():
                    raise
                caught_error = error
                span.record_exception(error)
            except Exception as error:
                caught_error = error
                span.record_exception(error)

        if self._queue.head() is not job:
            logger.debug(
                "Discarding outcome of a job removed while executing",
                extra={"queue": self.name, "job_id": str(job.job_id)},
            )
            return

        if caught_error is None:
            job.resolve(result)
            self._processing_job_error_count = 0
            self._remove_jobs(1, JobOutcome.SUCCEEDED)

            logger.debug(
                "Job completed",
                extra={"queue": self.name, "job_id": str(job.job_id), "attempt": attempt},
            )
            return

        self._processing_job_error_count += 1
        times = self._processing_job_error_count

        if self._metrics is not None:
            self._metrics.record_attempt_failed(self.name)

        try:
            self._error_handling_middleware(caught_error, times)
        except (Exception, asyncio.CancelledError) as middleware_error:
            # the middleware may have skipped the job itself
            if self._queue.head() is not job:
                return

            job.reject(middleware_error)
            self._processing_job_error_count = 0
            self._remove_jobs(1, JobOutcome.FAILED)

            logger.warning(
                "Job abandoned after failure",
                extra={
                    "queue": self.name,
                    "job_id": str(job.job_id),
                    "failures": times,
                    "error": repr(middleware_error),
                },
            )
            return

        logger.debug(
            "Job failure accepted, retrying",
            extra={
                "queue": self.name,
                "job_id": str(job.job_id),
                "failures": times,
                "error": repr(caught_error),
            },
        )

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def _remove_jobs(self, amount: int, outcome: JobOutcome) -> None:
        removed = self._queue.pop(amount)

        if self._metrics is not None:
            now = time.monotonic()
            for job in removed:
                self._metrics.record_job_completed(
                    queue=self.name,
                    outcome=outcome,
                    duration_seconds=now - job.submitted_at,
                )
        self._update_queue_depth()

    def _update_queue_depth(self) -> None:
        if self._metrics is not None:
            self._metrics.update_queue_depth(self.name, self._queue.size())

    def _on_listener_error(self, listener: Any, error: Exception) -> None:
        if self._metrics is not None:
            self._metrics.record_listener_error(self.name)
