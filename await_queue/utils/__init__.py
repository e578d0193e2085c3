"""
Primitives used by the sequencer: notification channel and ordered queue.
"""

from await_queue.utils.callback import Callback
from await_queue.utils.queue import Queue

__all__ = [
    "Callback",
    "Queue",
]
