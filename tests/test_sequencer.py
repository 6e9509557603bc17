"""Tests for AsyncSequencer: pacing, single-flight and fault handling."""

import asyncio
import logging

import pytest

from bststepper.aio import (
    AsyncSequencer,
    ErrorPolicy,
    ContinueOnErrorsPolicy,
    SequenceStatus,
    ThresholdPolicy,
)
from bststepper.config import SequencerConfig
from bststepper.consumers import CallbackConsumer, HighlightTracker
from bststepper.core import BinarySearchTree, StepEvent, StepKind, StepProducer
from bststepper.errors import ConsumerFault, SequencerBusyError
from bststepper.testing import RecordingConsumer, RecordingSleep, sample_tree


SEARCH_40 = [
    StepKind.VISIT_SEARCH, StepKind.MOVE,
    StepKind.VISIT_SEARCH, StepKind.MOVE,
    StepKind.VISIT_SEARCH, StepKind.FOUND,
]


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def recorder():
    return RecordingConsumer()


@pytest.fixture
def sequencer(sleep, recorder):
    return AsyncSequencer(SequencerConfig(), consumers=[recorder], sleep=sleep)


class TestDispatch:
    """Test ordered dispatch and completion."""

    @pytest.mark.asyncio
    async def test_dispatches_every_event_in_order(self, sequencer, recorder):
        outcome = await sequencer.run(sample_tree().search(40))

        assert outcome.status is SequenceStatus.COMPLETED
        assert outcome.ok
        assert outcome.steps_dispatched == 6
        assert outcome.result is True
        assert recorder.kinds == SEARCH_40
        assert recorder.starts == ["Searching for 40"]
        assert recorder.outcomes == [outcome]

    @pytest.mark.asyncio
    async def test_every_consumer_sees_event_before_next_is_produced(self, sleep):
        tree = BinarySearchTree()
        seen = []

        def first(event):
            seen.append(('first', event.kind))

        def second(event):
            seen.append(('second', event.kind))

        sequencer = AsyncSequencer(consumers=[first, second], sleep=sleep)
        await sequencer.run(tree.insert(10))

        assert seen == [('first', StepKind.INSERT_ROOT), ('second', StepKind.INSERT_ROOT)]

    @pytest.mark.asyncio
    async def test_mutation_visible_when_event_dispatched(self, sleep):
        """The root exists by the time consumers see INSERT_ROOT."""
        tree = BinarySearchTree()
        roots = []
        sequencer = AsyncSequencer(consumers=[lambda event: roots.append(tree.root.value)], sleep=sleep)

        await sequencer.run(tree.insert(42))

        assert roots == [42]

    @pytest.mark.asyncio
    async def test_empty_tree_search(self, sequencer, recorder):
        outcome = await sequencer.run(BinarySearchTree().search(7))
        assert outcome.ok
        assert outcome.result is False
        assert recorder.kinds == [StepKind.EMPTY]

    @pytest.mark.asyncio
    async def test_completion_listener(self, sequencer):
        received = []
        sequencer.add_completion_listener(received.append)
        outcome = await sequencer.run(sample_tree().inorder())
        assert received == [outcome]
        assert outcome.result == [20, 30, 40, 50, 60, 70, 80]


class TestPacing:
    """Test pauses between steps."""

    @pytest.mark.asyncio
    async def test_pause_after_each_step_and_trailing_pause(self, sequencer, sleep):
        await sequencer.run(sample_tree().search(40))
        assert sleep.calls == [0.4] * 6 + [1.0]

    @pytest.mark.asyncio
    async def test_no_trailing_pause_when_zero(self, sleep):
        sequencer = AsyncSequencer(SequencerConfig(step_delay_ms=10, trailing_delay_ms=0), sleep=sleep)
        await sequencer.run(BinarySearchTree().insert(1))
        assert sleep.calls == [0.01]

    @pytest.mark.asyncio
    async def test_speed_change_applies_to_next_pause(self, recorder):
        sequencer = None

        def speed_up(seconds):
            sequencer.step_delay_ms = 100

        sleep = RecordingSleep(on_sleep=speed_up)
        sequencer = AsyncSequencer(consumers=[recorder], sleep=sleep)

        await sequencer.run(sample_tree().search(40))

        assert sleep.calls[0] == 0.4
        assert sleep.calls[1:6] == [0.1] * 5

    def test_step_delay_must_be_positive(self, sequencer):
        with pytest.raises(ValueError):
            sequencer.step_delay_ms = 0
        sequencer.step_delay_ms = 25
        assert sequencer.config.step_delay_ms == 25

    def test_invalid_config_rejected(self):
        with pytest.raises(ValueError, match="step_delay_ms must be positive"):
            AsyncSequencer(SequencerConfig(step_delay_ms=-1))


class TestSingleFlight:
    """Test that only one sequence runs at a time."""

    @pytest.mark.asyncio
    async def test_second_request_rejected_first_unaffected(self, sequencer, recorder):
        tree = sample_tree()
        first = asyncio.ensure_future(sequencer.run(tree.search(40)))
        await asyncio.sleep(0)
        assert sequencer.busy
        assert sequencer.current.label == "Searching for 40"

        second = await sequencer.run(tree.insert(99))

        assert second.status is SequenceStatus.REJECTED
        assert second.steps_dispatched == 0
        outcome = await first
        assert outcome.ok
        assert recorder.kinds == SEARCH_40
        assert 99 not in tree
        assert not sequencer.busy

    @pytest.mark.asyncio
    async def test_strict_request_raises(self, sequencer):
        tree = sample_tree()
        first = asyncio.ensure_future(sequencer.run(tree.search(40)))
        await asyncio.sleep(0)

        with pytest.raises(SequencerBusyError):
            await sequencer.run(tree.search(20), strict=True)

        await first

    @pytest.mark.asyncio
    async def test_runs_back_to_back(self, sequencer, recorder):
        tree = BinarySearchTree()
        for value in (5, 3, 8):
            outcome = await sequencer.run(tree.insert(value))
            assert outcome.ok
        assert tree.values() == [3, 5, 8]
        assert recorder.starts == ["Inserting 5", "Inserting 3", "Inserting 8"]

    @pytest.mark.asyncio
    async def test_cancellation_releases_single_flight(self, sequencer, recorder):
        tracker_tree = sample_tree()
        tracker = HighlightTracker(tracker_tree)
        sequencer.add_consumer(tracker)

        task = asyncio.ensure_future(sequencer.run(tracker_tree.search(40)))
        await asyncio.sleep(0)
        assert not tracker.is_clean()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert not sequencer.busy
        assert tracker.is_clean()
        assert recorder.outcomes[0].status is SequenceStatus.ABORTED


class TestConsumerFaults:
    """Test what happens when a consumer raises."""

    @pytest.mark.asyncio
    async def test_fault_aborts_remaining_steps(self, sleep):
        tree = sample_tree()
        failing = RecordingConsumer(fail_on=StepKind.MOVE)
        after = RecordingConsumer()
        tracker = HighlightTracker(tree)
        sequencer = AsyncSequencer(consumers=[tracker, failing, after], sleep=sleep)

        outcome = await sequencer.run(tree.search(40))

        assert outcome.status is SequenceStatus.ABORTED
        assert outcome.steps_dispatched == 1
        assert isinstance(outcome.fault, ConsumerFault)
        assert outcome.fault.event.kind is StepKind.MOVE
        assert isinstance(outcome.fault.error, RuntimeError)
        assert outcome.fault.consumer is failing
        assert after.kinds == [StepKind.VISIT_SEARCH]
        assert failing.outcomes == after.outcomes == [outcome]
        assert tracker.is_clean()
        assert not sequencer.busy
        assert sleep.calls == [0.4, 1.0]

    @pytest.mark.asyncio
    async def test_fault_after_mutation_keeps_tree_valid(self, sleep):
        tree = sample_tree()
        failing = RecordingConsumer(fail_on=StepKind.INSERT_RIGHT)
        sequencer = AsyncSequencer(consumers=[failing], sleep=sleep)

        outcome = await sequencer.run(tree.insert(45))

        assert outcome.status is SequenceStatus.ABORTED
        assert 45 in tree
        assert tree.is_valid()

    @pytest.mark.asyncio
    async def test_fault_in_on_start_aborts_before_first_step(self, sleep):
        class BrokenStart(RecordingConsumer):
            def on_start(self, producer):
                raise ValueError("no start")

        tree = BinarySearchTree()
        producer = tree.insert(1)
        sequencer = AsyncSequencer(consumers=[BrokenStart()], sleep=sleep)

        outcome = await sequencer.run(producer)

        assert outcome.status is SequenceStatus.ABORTED
        assert outcome.fault.event is None
        assert producer.emitted == 0
        assert tree.root is None

    @pytest.mark.asyncio
    async def test_continue_policy_keeps_dispatching(self, sleep):
        policy = ContinueOnErrorsPolicy(verbose=False)
        failing = RecordingConsumer(fail_on=StepKind.MOVE)
        sequencer = AsyncSequencer(consumers=[failing], error_policy=policy, sleep=sleep)

        outcome = await sequencer.run(sample_tree().search(40))

        assert outcome.ok
        assert failing.kinds == SEARCH_40
        assert len(policy.errors) == 2
        assert policy.get_statistics()['by_consumer'] == {'RecordingConsumer': 2}

    @pytest.mark.asyncio
    async def test_threshold_policy_aborts_when_exceeded(self, sleep):
        policy = ThresholdPolicy(max_errors=1, verbose=False)
        failing = RecordingConsumer(fail_on=StepKind.MOVE)
        sequencer = AsyncSequencer(consumers=[failing], error_policy=policy, sleep=sleep)

        outcome = await sequencer.run(sample_tree().search(40))

        assert outcome.status is SequenceStatus.ABORTED
        assert outcome.steps_dispatched == 3
        assert policy.error_count == 2

    @pytest.mark.asyncio
    async def test_producer_error_is_reported(self, sequencer, recorder):
        def broken():
            yield StepEvent(StepKind.VISIT, "first")
            raise KeyError("lost node")

        outcome = await sequencer.run(StepProducer(broken(), 'custom', 'Broken'))

        assert outcome.status is SequenceStatus.ABORTED
        assert isinstance(outcome.error, KeyError)
        assert outcome.fault is None
        assert recorder.kinds == [StepKind.VISIT]
        assert not sequencer.busy

    @pytest.mark.asyncio
    async def test_failing_completion_handlers_are_logged(self, sequencer, recorder, caplog):
        class BrokenComplete(RecordingConsumer):
            def on_complete(self, outcome):
                raise RuntimeError("cannot finish")

        def broken_listener(outcome):
            raise RuntimeError("listener down")

        sequencer.add_consumer(BrokenComplete())
        sequencer.add_completion_listener(broken_listener)

        with caplog.at_level(logging.ERROR, logger="bststepper.aio.sequencer"):
            outcome = await sequencer.run(BinarySearchTree().insert(1))

        assert outcome.ok
        assert recorder.outcomes == [outcome]
        assert not sequencer.busy
        assert "Completion listener failed" in caplog.text
        assert "failed handling completion" in caplog.text

    @pytest.mark.asyncio
    async def test_policy_raising_plain_error_still_completes(self, sleep):
        class ReRaisePolicy(ErrorPolicy):
            def handle(self, fault):
                raise fault.error

        tree = sample_tree()
        failing = RecordingConsumer(fail_on=StepKind.MOVE)
        tracker = HighlightTracker(tree)
        sequencer = AsyncSequencer(consumers=[tracker, failing], error_policy=ReRaisePolicy(), sleep=sleep)

        outcome = await sequencer.run(tree.search(40))

        assert outcome.status is SequenceStatus.ABORTED
        assert isinstance(outcome.fault, ConsumerFault)
        assert isinstance(outcome.fault.error, RuntimeError)
        assert outcome.fault.event.kind is StepKind.MOVE
        assert failing.outcomes == [outcome]
        assert tracker.is_clean()
        assert not sequencer.busy

    @pytest.mark.asyncio
    async def test_aborted_producer_is_closed(self, sleep):
        tree = sample_tree()
        producer = tree.search(40)
        failing = RecordingConsumer(fail_on=StepKind.MOVE)
        sequencer = AsyncSequencer(consumers=[failing], sleep=sleep)

        outcome = await sequencer.run(producer)

        assert outcome.status is SequenceStatus.ABORTED
        assert producer.exhausted
        assert list(producer) == []

    @pytest.mark.asyncio
    async def test_cancelled_producer_is_closed(self, sequencer):
        producer = sample_tree().search(40)
        task = asyncio.ensure_future(sequencer.run(producer))
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert producer.exhausted
        assert producer.emitted == 1
        assert list(producer) == []


class TestRegistration:
    """Test adding and removing consumers."""

    def test_callables_are_wrapped(self, sequencer):
        wrapped = sequencer.add_consumer(print)
        assert isinstance(wrapped, CallbackConsumer)
        assert wrapped in sequencer.consumers
        assert sequencer.remove_consumer(wrapped)
        assert not sequencer.remove_consumer(wrapped)

    def test_non_callable_rejected(self, sequencer):
        with pytest.raises(TypeError):
            sequencer.add_consumer(42)
