"""
Ordered work queue with size-change notifications.
"""

from collections import deque
from collections.abc import Callable
from itertools import islice
from typing import Any, Generic, TypeVar

from await_queue.utils.callback import Callback, ErrorHook

T = TypeVar("T")

AddedEventListener = Callable[[int], Any]
EmptyEventListener = Callable[[], Any]


class Queue(Generic[T]):
    """
    FIFO sequence of opaque items.

    Fires the "added" channel with the new size after every push, and the
    "empty" channel whenever a pop takes the queue from non-empty to empty.
    Listener lifecycles are independent of the items: ``cleanup`` drops
    listeners and leaves items alone.
    """

    def __init__(self, listener_error_hook: ErrorHook | None = None):
        self._items: deque[T] = deque()
        self._added_callback = Callback(error_hook=listener_error_hook)
        self._empty_callback = Callback(error_hook=listener_error_hook)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def push(self, item: T) -> None:
        """Append an item to the back and notify added listeners."""
        self._items.append(item)

        self._added_callback.trigger(len(self._items))

    def pop(self, amount: int = 1) -> list[T]:
        """
        Remove up to ``amount`` items from the front.

        Args:
            amount: Number of items to remove. Fewer are removed if the
                queue is shorter.

        Returns:
            The removed items, front first.

        Raises:
            ValueError: If amount is negative.
        """
        if amount < 0:
            raise ValueError(f"amount must be >= 0, got {amount}")

        was_empty = not self._items
        removed = [self._items.popleft() for _ in range(min(amount, len(self._items)))]

        if not was_empty and not self._items:
            self._empty_callback.trigger()

        return removed

    def size(self) -> int:
        return len(self._items)

    def head(self) -> T | None:
        """Get the front item, or None if the queue is empty."""
        if not self._items:
            return None

        return self._items[0]

    def tail(self) -> T | None:
        """Get the back item, or None if the queue is empty."""
        if not self._items:
            return None

        return self._items[-1]

    def items(self, amount: int | None = None) -> list[T]:
        """Copy of the first ``amount`` items (all items if None)."""
        if amount is None:
            return list(self._items)
        return list(islice(self._items, max(amount, 0)))

    def on_added(self, listener: AddedEventListener) -> Callable[[], None]:
        """
        Listen for pushes.

        Returns:
            A function that unregisters the listener.
        """
        self._added_callback.add_listener(listener)

        def cancel() -> None:
            self._added_callback.remove_listener(listener)

        return cancel

    def on_empty(self, listener: EmptyEventListener) -> Callable[[], None]:
        """
        Listen for the queue becoming empty.

        Returns:
            A function that unregisters the listener.
        """
        self._empty_callback.add_listener(listener)

        def cancel() -> None:
            self._empty_callback.remove_listener(listener)

        return cancel

    def listener_count(self) -> int:
        """Total listeners registered across both channels."""
        return len(self._added_callback) + len(self._empty_callback)

    def cleanup(self) -> None:
        """Unregister every listener. Items are kept."""
        self._added_callback.clear_listeners()
        self._empty_callback.clear_listeners()
