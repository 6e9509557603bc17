"""Toast notification consumer.

Search hits and misses pop up a short-lived toast. Expiry is handled by
a TTLCache keyed by arrival order, so reading the board never returns a
toast older than its time-to-live.
"""

import itertools
import time
from collections import namedtuple
from typing import Callable, List

from cachetools import TTLCache

from ..core.events import StepEvent, StepKind
from .base import StepConsumer


Toast = namedtuple('Toast', ['message', 'level'])


class ToastBoard(StepConsumer):
    """Currently visible toasts.

    Args:
        ttl_seconds: How long a toast stays visible
        maxsize: Most toasts kept at once; the oldest is dropped first
        timer: Clock used for expiry (tests pass a fake one)
    """

    def __init__(self, ttl_seconds: float = 3.0, maxsize: int = 16,
                 timer: Callable[[], float] = time.monotonic):
        self._toasts = TTLCache(maxsize=maxsize, ttl=ttl_seconds, timer=timer)
        self._order = itertools.count()

    def on_step(self, event: StepEvent) -> None:
        if event.kind is StepKind.FOUND:
            self.push(f"Found {event.node.value}!")
        elif event.kind is StepKind.NOT_FOUND:
            self.push(event.message, 'error')

    def push(self, message: str, level: str = 'info') -> Toast:
        toast = Toast(message, level)
        self._toasts[next(self._order)] = toast
        return toast

    def active(self) -> List[Toast]:
        """Unexpired toasts, oldest first."""
        self._toasts.expire()
        return [toast for _, toast in sorted(self._toasts.items())]

    def __len__(self) -> int:
        return len(self.active())
