"""
Exceptions raised by BSTStepper.

Tree misses (duplicate insert, value not found, empty tree) are not
exceptions: they are reported as terminal step events. Exceptions are
reserved for faults in the machinery that consumes those events.
"""

from typing import Any, Optional


class BSTStepperError(Exception):
    """Base class for all BSTStepper errors."""


class ConsumerFault(BSTStepperError):
    """
    A registered consumer failed while handling a step.

    The sequencer wraps the original exception so the completion
    notification can say which consumer failed and on which step.
    The original exception is available as ``error`` and as ``__cause__``.
    """

    def __init__(self, consumer: Any, event: Optional[Any], error: Exception):
        self.consumer = consumer
        self.event = event
        self.error = error
        where = event.kind.value if event is not None else "start"
        super().__init__(
            f"{type(consumer).__name__} failed on {where}: {type(error).__name__}: {error}"
        )
        self.__cause__ = error


class SequencerBusyError(BSTStepperError):
    """Raised by a strict run request while another sequence is in flight."""
