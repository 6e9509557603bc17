"""Step consumer abstraction.

Consumers are what the sequencer dispatches steps to: a renderer, an
audio cue mapper, a log. The tree knows nothing about them.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable

from ..core.events import StepEvent
from ..core.producer import StepProducer

if TYPE_CHECKING:
    from ..aio.sequencer import SequenceOutcome


class StepConsumer(ABC):
    """Abstract base class for step consumers.

    Handlers run synchronously on the sequencer's loop and must return
    promptly. Raising from a handler is reported as a consumer fault.
    """

    def on_start(self, producer: StepProducer) -> None:
        """Called once before the first step of a sequence.

        Default implementation does nothing.
        """

    @abstractmethod
    def on_step(self, event: StepEvent) -> None:
        """Handle one step.

        Node references on the event are only valid during this call.

        Args:
            event: The step just produced
        """
        pass

    def on_complete(self, outcome: 'SequenceOutcome') -> None:
        """Called once after the sequence finished, aborted or faulted.

        Default implementation does nothing.
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class CallbackConsumer(StepConsumer):
    """Adapts a plain ``callback(event)`` function into a consumer."""

    def __init__(self, callback: Callable[[StepEvent], None]):
        self.callback = callback

    def on_step(self, event: StepEvent) -> None:
        self.callback(event)

    def __repr__(self) -> str:
        name = getattr(self.callback, '__qualname__', repr(self.callback))
        return f"CallbackConsumer({name})"
