"""
Error-handling middleware for failed jobs.

A middleware is called with the error raised by the head job and the number
of consecutive failures counted for it. Returning accepts the error and
leaves the job at the head to be retried on the next drive cycle; raising
gives up and rejects the job's future with the raised error.
"""

from await_queue.errors import JobRetriesExhaustedError
from await_queue.types.job import JobErrorHandlingMiddleware


def default_error_handling_middleware(error: Exception, times: int) -> None:
    """Give up on the first failure, re-raising the job's own error."""
    raise error


def ignore_errors(error: Exception, times: int) -> None:
    """Accept every failure. The job is retried until it succeeds or is skipped."""
    return None


def retry_middleware(max_failures: int) -> JobErrorHandlingMiddleware:
    """
    Build a middleware that retries a job until it has failed ``max_failures`` times.

    Args:
        max_failures: Consecutive failures after which the job is abandoned.

    Returns:
        Middleware raising JobRetriesExhaustedError on the last failure.

    Example:
        queue.use_error_handling_middleware(retry_middleware(3))
    """
    if max_failures < 1:
        raise ValueError(f"max_failures must be >= 1, got {max_failures}")

    def middleware(error: Exception, times: int) -> None:
        if times >= max_failures:
            raise JobRetriesExhaustedError(error, times) from error

    return middleware
