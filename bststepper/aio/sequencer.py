"""Async step sequencer.

Drives one StepProducer at a time: pull a step, hand it to every
consumer, pause, repeat. A run requested while another is in flight is
rejected rather than queued, so two operations never interleave on the
same tree.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Union

from ..config import SequencerConfig
from ..consumers.base import CallbackConsumer, StepConsumer
from ..core.events import StepEvent
from ..core.producer import StepProducer
from ..errors import ConsumerFault, SequencerBusyError
from .error_policies import ErrorPolicy, FailFastPolicy


logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]
CompletionListener = Callable[['SequenceOutcome'], None]


class SequenceStatus(Enum):
    """How a run request ended."""
    COMPLETED = "completed"   # Producer exhausted
    ABORTED = "aborted"       # Consumer fault, producer error or cancellation
    REJECTED = "rejected"     # Another sequence was already in flight


@dataclass
class SequenceOutcome:
    """Result of one run request.

    ``result`` is the producer's terminal value (e.g. the search outcome)
    and is only set for completed runs. ``error`` holds the ConsumerFault
    or producer exception that aborted the run.
    """

    status: SequenceStatus
    operation: str
    label: str
    steps_dispatched: int = 0
    result: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.status is SequenceStatus.COMPLETED

    @property
    def fault(self) -> Optional[ConsumerFault]:
        """The consumer fault that aborted the run, if that is what happened."""
        return self.error if isinstance(self.error, ConsumerFault) else None


class AsyncSequencer:
    """Single-flight, paced dispatcher of step events.

    Args:
        config: Pacing settings; read live, so edits apply to the next pause
        consumers: Initial consumers (StepConsumer or plain callables)
        error_policy: What to do when a consumer raises (default FailFastPolicy)
        sleep: Coroutine function used for pauses (default asyncio.sleep)
    """

    def __init__(
        self,
        config: Optional[SequencerConfig] = None,
        consumers: Optional[List[Union[StepConsumer, Callable[[StepEvent], None]]]] = None,
        error_policy: Optional[ErrorPolicy] = None,
        sleep: Optional[SleepFunc] = None,
    ):
        self.config = config or SequencerConfig()
        errors = self.config.validate()
        if errors:
            raise ValueError("Invalid sequencer config: " + "; ".join(errors))

        self._consumers: List[StepConsumer] = []
        self._listeners: List[CompletionListener] = []
        self._policy = error_policy or FailFastPolicy()
        self._sleep = sleep or asyncio.sleep
        self._busy = False
        self._current: Optional[StepProducer] = None

        for consumer in consumers or []:
            self.add_consumer(consumer)

    # Configuration

    @property
    def busy(self) -> bool:
        """True while a sequence is in flight."""
        return self._busy

    @property
    def current(self) -> Optional[StepProducer]:
        """The producer being driven, if any."""
        return self._current

    @property
    def step_delay_ms(self) -> float:
        return self.config.step_delay_ms

    @step_delay_ms.setter
    def step_delay_ms(self, value: float) -> None:
        if value <= 0:
            raise ValueError(f"step_delay_ms must be positive, got {value}")
        self.config.step_delay_ms = value

    @property
    def error_policy(self) -> ErrorPolicy:
        return self._policy

    @error_policy.setter
    def error_policy(self, policy: ErrorPolicy) -> None:
        self._policy = policy

    # Registration

    def add_consumer(self, consumer: Union[StepConsumer, Callable[[StepEvent], None]]) -> StepConsumer:
        """Register a consumer; plain callables are wrapped.

        Returns:
            The registered StepConsumer (needed to remove a wrapped callable)
        """
        if not isinstance(consumer, StepConsumer):
            if not callable(consumer):
                raise TypeError(f"Consumer must be a StepConsumer or callable, got {consumer!r}")
            consumer = CallbackConsumer(consumer)
        self._consumers.append(consumer)
        logger.debug("Registered consumer %r", consumer)
        return consumer

    def remove_consumer(self, consumer: StepConsumer) -> bool:
        """Unregister a consumer.

        Returns:
            True if it was removed, False if it was not registered
        """
        try:
            self._consumers.remove(consumer)
            return True
        except ValueError:
            return False

    @property
    def consumers(self) -> List[StepConsumer]:
        return list(self._consumers)

    def add_completion_listener(self, listener: CompletionListener) -> None:
        """Call ``listener(outcome)`` after every finished or aborted run."""
        self._listeners.append(listener)

    # Running

    async def run(self, producer: StepProducer, strict: bool = False) -> SequenceOutcome:
        """Drive ``producer`` to completion.

        Args:
            producer: Steps to dispatch
            strict: Raise SequencerBusyError instead of returning a
                REJECTED outcome when another sequence is in flight

        Returns:
            SequenceOutcome describing how the run ended
        """
        if self._busy:
            logger.info("Rejected %r: %r is still running", producer.label, self._current.label)
            if strict:
                raise SequencerBusyError(f"Cannot start {producer.label!r} while a sequence is running")
            return SequenceOutcome(SequenceStatus.REJECTED, producer.operation, producer.label)

        self._busy = True
        self._current = producer
        outcome = SequenceOutcome(SequenceStatus.COMPLETED, producer.operation, producer.label)
        logger.debug("Starting %r", producer.label)

        try:
            error = self._announce_start(producer)
            if error is None:
                error = await self._drive(producer, outcome)

            if error is not None:
                outcome.status = SequenceStatus.ABORTED
                outcome.error = error
            else:
                outcome.result = producer.result

            await self._pause(self.config.trailing_delay_ms)
            self._notify_complete(outcome)
        except asyncio.CancelledError:
            outcome.status = SequenceStatus.ABORTED
            self._notify_complete(outcome)
            raise
        finally:
            if not outcome.ok:
                producer.close()
            self._current = None
            self._busy = False

        if outcome.ok:
            logger.debug("Completed %r after %d steps", outcome.label, outcome.steps_dispatched)
        return outcome

    async def _drive(self, producer: StepProducer, outcome: SequenceOutcome) -> Optional[BaseException]:
        """Pull, dispatch and pause until exhausted or aborted."""
        while True:
            try:
                event = next(producer)
            except StopIteration:
                return None
            except Exception as exc:
                logger.exception("Producer for %r failed", producer.label)
                return exc

            fault = self._dispatch(event)
            if fault is not None:
                logger.error("Aborting %r: %s", producer.label, fault)
                return fault
            outcome.steps_dispatched += 1

            # Read at pause start so a speed change applies to this step
            await self._pause(self.config.step_delay_ms)

    def _announce_start(self, producer: StepProducer) -> Optional[ConsumerFault]:
        for consumer in list(self._consumers):
            try:
                consumer.on_start(producer)
            except Exception as exc:
                fault = self._handle_fault(consumer, None, exc)
                if fault is not None:
                    logger.error("Aborting %r before first step: %s", producer.label, fault)
                    return fault
        return None

    def _dispatch(self, event: StepEvent) -> Optional[ConsumerFault]:
        """Hand ``event`` to every consumer in registration order.

        Returns:
            The fault to abort with, or None to keep going
        """
        for consumer in list(self._consumers):
            try:
                consumer.on_step(event)
            except Exception as exc:
                fault = self._handle_fault(consumer, event, exc)
                if fault is not None:
                    return fault
        return None

    def _handle_fault(self, consumer: StepConsumer, event: Optional[StepEvent],
                      exc: Exception) -> Optional[ConsumerFault]:
        try:
            self._policy.handle(ConsumerFault(consumer, event, exc))
        except ConsumerFault as fault:
            return fault
        except Exception as policy_exc:
            # A policy may re-raise the bare error; it still aborts the run
            return ConsumerFault(consumer, event, policy_exc)
        return None

    def _notify_complete(self, outcome: SequenceOutcome) -> None:
        """Tell consumers and listeners the run is over.

        A failing handler here is logged and does not stop the others, so
        every consumer gets the chance to reset its transient state.
        """
        for consumer in list(self._consumers):
            try:
                consumer.on_complete(outcome)
            except Exception:
                logger.exception("%r failed handling completion of %r", consumer, outcome.label)
        for listener in list(self._listeners):
            try:
                listener(outcome)
            except Exception:
                logger.exception("Completion listener failed for %r", outcome.label)

    async def _pause(self, delay_ms: float) -> None:
        if delay_ms > 0:
            await self._sleep(delay_ms / 1000.0)

    def __repr__(self) -> str:
        state = f"running {self._current.label!r}" if self._busy else "idle"
        return f"AsyncSequencer({state}, consumers={len(self._consumers)})"
