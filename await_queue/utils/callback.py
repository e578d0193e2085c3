"""
Multi-listener notification channel.
"""

import asyncio
import inspect
from collections.abc import Callable
from typing import Any

Listener = Callable[..., Any]
ErrorHook = Callable[[Listener, Exception], Any]


class Callback:
    """
    Fan-out broadcaster of argument values to a set of listeners.

    Listeners are keyed by identity, so registering the same callable twice
    keeps a single registration. Errors raised by a listener are swallowed
    and never stop the remaining listeners from running.

    A listener returning an awaitable (e.g. an ``async def`` function) has it
    scheduled as a task on the running loop; errors raised by that task are
    swallowed the same way.
    """

    def __init__(self, error_hook: ErrorHook | None = None):
        """
        Initialize the channel.

        Args:
            error_hook: Optional callable receiving ``(listener, error)`` for
                every swallowed listener error.
        """
        # dict keeps insertion order, but callers must not rely on it
        self._listeners: dict[Listener, None] = {}
        self._error_hook = error_hook
        self._pending: set[asyncio.Future] = set()

    def __len__(self) -> int:
        return len(self._listeners)

    def __contains__(self, listener: object) -> bool:
        return listener in self._listeners

    def add_listener(self, listener: Listener) -> None:
        """Register a listener. Raises TypeError if it is not callable."""
        if not callable(listener):
            raise TypeError(f"Listener must be callable, got {type(listener).__name__}")

        self._listeners[listener] = None

    def remove_listener(self, listener: Listener) -> None:
        """Unregister a listener. No-op if it is not registered."""
        if not callable(listener):
            raise TypeError(f"Listener must be callable, got {type(listener).__name__}")

        self._listeners.pop(listener, None)

    def clear_listeners(self) -> None:
        """Remove all listeners."""
        self._listeners.clear()

    def trigger(self, *args: Any) -> None:
        """
        Invoke every registered listener with ``args``.

        Listeners added or removed while triggering take effect on the
        next trigger.
        """
        for listener in list(self._listeners):
            try:
                result = listener(*args)
                if inspect.isawaitable(result):
                    self._schedule(listener, result)
            except Exception as error:
                self._report(listener, error)

    def _schedule(self, listener: Listener, awaitable: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as error:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            self._report(listener, error)
            return

        future = asyncio.ensure_future(awaitable, loop=loop)
        self._pending.add(future)

        def done(fut: asyncio.Future) -> None:
            self._pending.discard(fut)
            if fut.cancelled():
                return
            error = fut.exception()
            if isinstance(error, Exception):
                self._report(listener, error)

        future.add_done_callback(done)

    def _report(self, listener: Listener, error: Exception) -> None:
        if self._error_hook is None:
            return
        try:
            self._error_hook(listener, error)
        except Exception:
            pass
