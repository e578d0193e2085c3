"""
Pytest configuration and shared fixtures.
"""

import asyncio
from collections.abc import Generator
from uuid import uuid4

import pytest
from prometheus_client import CollectorRegistry

from await_queue.config import Settings
from await_queue.observability.metrics import MetricsCollector
from await_queue.sequencer import AwaitQueue


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        log_level="DEBUG",
        log_format="console",
        queue_start_paused=True,
        metrics_enabled=False,
        tracing_enabled=False,
    )


@pytest.fixture
def registry() -> CollectorRegistry:
    """Isolated Prometheus registry, so collectors don't clash between tests."""
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> MetricsCollector:
    """Create a metrics collector bound to the test registry."""
    return MetricsCollector(registry=registry)


@pytest.fixture
def queue_name() -> str:
    """Generate a unique sequencer name."""
    return f"test-queue-{uuid4().hex[:8]}"


@pytest.fixture
def sequencer(
    queue_name: str,
    test_settings: Settings,
    metrics: MetricsCollector,
) -> Generator[AwaitQueue]:
    """
    Create a paused sequencer and tear it down after the test.

    Futures of every submitted job are tracked so rejections the test never
    awaited are retrieved on teardown instead of being reported by asyncio.
    """
    queue = AwaitQueue(name=queue_name, settings=test_settings, metrics=metrics)
    futures: list[asyncio.Future] = []
    submit = queue.submit

    def tracking_submit(fn):
        future = submit(fn)
        futures.append(future)
        return future

    queue.submit = tracking_submit

    yield queue

    queue.cleanup()

    for future in futures:
        if future.done() and not future.cancelled():
            future.exception()
