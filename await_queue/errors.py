"""
Exceptions raised into job futures.

A submitted job's future rejects in exactly two ways: the job is removed by
skip/clear (``JobCanceledError``), or the error-handling middleware gives up
on a failed attempt (whatever the middleware raises).
"""


class AwaitQueueError(Exception):
    """Base class for errors raised by the sequencer itself."""


class JobCanceledError(AwaitQueueError):
    """Raised into a job's future when it is skipped or cleared."""

    def __init__(self, message: str = "Job was canceled before it completed"):
        super().__init__(message)


class JobRetriesExhaustedError(AwaitQueueError):
    """
    Raised by ``retry_middleware`` when a job has failed too many times.

    Attributes:
        error: The error raised by the last failed attempt.
        failures: Consecutive failures counted for the job.
    """

    def __init__(self, error: BaseException, failures: int):
        self.error = error
        self.failures = failures
        super().__init__(f"Job failed {failures} time(s): {error!r}")
