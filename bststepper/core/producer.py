"""Step producers.

A StepProducer wraps the generator behind one tree operation. Nothing
runs until the first step is pulled; each pull advances the operation to
its next event, performing that event's mutation first. Once exhausted,
further pulls yield nothing and the operation's terminal result (the
generator's return value) is available as ``result``.
"""

from typing import Any, Generator, Iterator, List, Optional

from .events import StepEvent


StepGenerator = Generator[StepEvent, None, Any]


class StepProducer(Iterator[StepEvent]):
    """Lazy, single-pass sequence of step events for one operation.

    Attributes:
        operation: Short operation name ('insert', 'search', 'delete',
            'inorder', 'preorder', 'postorder')
        label: Human-readable description, e.g. 'Inserting 42'
        result: Terminal outcome once exhausted (None before)
    """

    def __init__(self, steps: StepGenerator, operation: str, label: str):
        self._steps = steps
        self.operation = operation
        self.label = label
        self.result: Any = None
        self._exhausted = False
        self._emitted = 0

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def emitted(self) -> int:
        """Number of events pulled so far."""
        return self._emitted

    def __iter__(self) -> 'StepProducer':
        return self

    def __next__(self) -> StepEvent:
        if self._exhausted:
            raise StopIteration
        try:
            event = next(self._steps)
        except StopIteration as stop:
            self._exhausted = True
            self.result = stop.value
            raise StopIteration from None
        except Exception:
            self._exhausted = True
            raise
        self._emitted += 1
        return event

    def close(self) -> None:
        """Abandon the operation; later pulls yield nothing.

        Steps already pulled keep their mutations. ``result`` stays None
        unless the operation had already finished.
        """
        if not self._exhausted:
            self._exhausted = True
            self._steps.close()

    def drain(self) -> Any:
        """Pull every remaining event without pacing and return the result.

        Used to apply an operation instantly, e.g. to seed a tree.
        """
        for _ in self:
            pass
        return self.result

    def collect(self) -> List[StepEvent]:
        """Pull every remaining event and return them in order."""
        return list(self)

    def __repr__(self) -> str:
        state = "exhausted" if self._exhausted else "pending"
        return f"StepProducer({self.operation!r}, {self.label!r}, {state})"


def drain(producer: StepProducer) -> Optional[Any]:
    """Run a producer to completion instantly and return its result."""
    return producer.drain()
