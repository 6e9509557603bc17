"""Trace log consumer.

Keeps the short, newest-first operation log shown beside the tree. A
traversal writes into a single sticky entry that grows as nodes are
visited ("Inorder: 20 → 30 → 40") instead of one line per node.
"""

import itertools
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Deque, List, Optional

from ..core.events import INSERT_KINDS, StepEvent, StepKind
from ..core.producer import StepProducer
from .base import StepConsumer


logger = logging.getLogger(__name__)

TRAVERSAL_OPERATIONS = ('inorder', 'preorder', 'postorder')


@dataclass
class LogEntry:
    message: str
    level: str = 'info'                   # info, success, error or system
    timestamp: datetime = field(default_factory=datetime.now)
    entry_id: Optional[str] = None

    @property
    def time_label(self) -> str:
        return self.timestamp.strftime('%H:%M:%S')


class TraceLog(StepConsumer):
    """Bounded, newest-first log of what each operation did."""

    def __init__(self, max_entries: int = 20, clock: Callable[[], datetime] = datetime.now):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._entries: Deque[LogEntry] = deque(maxlen=max_entries)
        self._clock = clock
        self._ids = itertools.count(1)
        self._sticky_id: Optional[str] = None
        self._prefix = ''
        self._visited: List[Any] = []
        self._deleting: Any = None

    @property
    def entries(self) -> List[LogEntry]:
        """Entries newest first."""
        return list(self._entries)

    @property
    def messages(self) -> List[str]:
        return [entry.message for entry in self._entries]

    def log(self, message: str, level: str = 'info', entry_id: Optional[str] = None) -> LogEntry:
        """Add an entry, or update the entry with ``entry_id`` if present."""
        if entry_id is not None:
            for entry in self._entries:
                if entry.entry_id == entry_id:
                    entry.message = message
                    return entry
        entry = LogEntry(message, level, self._clock(), entry_id)
        self._entries.appendleft(entry)
        logger.debug("[%s] %s", level, message)
        return entry

    def clear(self) -> None:
        self._entries.clear()

    # StepConsumer

    def on_start(self, producer: StepProducer) -> None:
        self._visited = []
        self._deleting = None
        if producer.operation in TRAVERSAL_OPERATIONS:
            self._sticky_id = f"log-{next(self._ids)}"
            self._prefix = f"{producer.operation.capitalize()}: "
            self.log(f"{self._prefix} ...", entry_id=self._sticky_id)
        else:
            self._sticky_id = None
            self.log(producer.label)

    def on_step(self, event: StepEvent) -> None:
        kind = event.kind
        if kind in INSERT_KINDS:
            self.log(f"Inserted node {event.node.value}")
        elif kind is StepKind.FOUND:
            self.log(f"Found value {event.node.value}!", 'success')
        elif kind is StepKind.NOT_FOUND:
            self.log(event.message, 'error')
        elif kind is StepKind.FOUND_DELETE:
            self._deleting = event.node.value
        elif kind is StepKind.DELETE_DONE:
            removed = self._deleting if self._deleting is not None else event.node.value
            self.log(f"Deleted node {removed}")
        elif kind is StepKind.TRAVERSE_VISIT and self._sticky_id is not None:
            self._visited.append(event.node.value)
            self.log(self._prefix + " → ".join(str(v) for v in self._visited), entry_id=self._sticky_id)

    def on_complete(self, outcome) -> None:
        if outcome.error is not None:
            self.log(f"Error: {outcome.error}", 'error')
        self._sticky_id = None
