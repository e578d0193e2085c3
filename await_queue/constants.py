"""
Application constants.
Centralized location for all constant values used across the package.
"""

from enum import StrEnum


class SequencerState(StrEnum):
    """
    Sequencer lifecycle states.

    State transitions:
    - PAUSED -> IDLE (run, queue empty)
    - PAUSED/IDLE -> PROCESSING (run or submit with pending jobs)
    - PROCESSING -> PAUSING (pause while a job is in flight)
    - PAUSING -> PROCESSING (run while a job is in flight)
    - PROCESSING -> IDLE (queue drained)
    - PAUSING -> PAUSED (in-flight job finished)
    - IDLE -> PAUSED (pause)
    """

    PAUSED = "paused"
    IDLE = "idle"
    PROCESSING = "processing"
    PAUSING = "pausing"

    @property
    def is_processing(self) -> bool:
        return self in (SequencerState.PROCESSING, SequencerState.PAUSING)

    @property
    def is_paused(self) -> bool:
        return self in (SequencerState.PAUSED, SequencerState.PAUSING)


class JobOutcome(StrEnum):
    """How a job left the queue."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"


# Metrics names
METRIC_QUEUE_DEPTH = "await_queue_depth"
METRIC_JOBS_SUBMITTED = "await_queue_jobs_submitted_total"
METRIC_JOBS_COMPLETED = "await_queue_jobs_completed_total"
METRIC_JOB_DURATION = "await_queue_job_duration_seconds"
METRIC_JOB_ATTEMPT_FAILURES = "await_queue_job_attempt_failures_total"
METRIC_LISTENER_ERRORS = "await_queue_listener_errors_total"

# Trace span names
SPAN_EXECUTE_JOB = "execute_job"
