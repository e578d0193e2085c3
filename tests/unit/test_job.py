"""
Unit tests for the job type.
"""

import asyncio

import pytest

from await_queue.errors import JobCanceledError
from await_queue.types.job import Job


async def noop() -> None:
    return None


class TestJob:
    """Tests for Job settlement."""

    @pytest.mark.asyncio
    async def test_resolve_once(self):
        """Test only the first settlement reaches the future."""
        job = Job(fn=noop, future=asyncio.get_running_loop().create_future())

        assert job.resolve("first") is True
        assert job.resolve("second") is False
        assert job.reject(JobCanceledError()) is False

        assert await job.future == "first"

    @pytest.mark.asyncio
    async def test_reject_once(self):
        """Test a rejected job cannot be resolved afterwards."""
        job = Job(fn=noop, future=asyncio.get_running_loop().create_future())

        assert job.reject(JobCanceledError()) is True
        assert job.resolve("late") is False

        with pytest.raises(JobCanceledError):
            await job.future

    @pytest.mark.asyncio
    async def test_cancelled_future_left_alone(self):
        """Test settling a future cancelled by its caller is a no-op."""
        job = Job(fn=noop, future=asyncio.get_running_loop().create_future())
        job.future.cancel()

        assert job.resolve("ignored") is False
        assert job.future.cancelled()

    @pytest.mark.asyncio
    async def test_ids_unique(self):
        """Test every job gets its own id."""
        loop = asyncio.get_running_loop()
        first = Job(fn=noop, future=loop.create_future())
        second = Job(fn=noop, future=loop.create_future())

        assert first.job_id != second.job_id
        first.future.cancel()
        second.future.cancel()
