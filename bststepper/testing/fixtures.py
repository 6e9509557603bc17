"""Test fixtures for BSTStepper consumers.

These helpers give test suites a stable way to record what a sequencer
dispatched and to check tree invariants, without depending on the
internals of the tree or the sequencer.
"""

import asyncio
from typing import Any, Iterable, List, Optional

from ..api import build_tree
from ..consumers.base import StepConsumer
from ..core.events import StepEvent, StepKind
from ..core.node import Node
from ..core.producer import StepProducer
from ..core.tree import BinarySearchTree


SAMPLE_VALUES = [50, 30, 70, 20, 40, 60, 80]


class RecordingConsumer(StepConsumer):
    """Consumer that remembers everything it was given.

    Node values are captured at dispatch time, since a later step may
    overwrite them.

    Example:
        recorder = RecordingConsumer()
        sequencer.add_consumer(recorder)
        await sequencer.run(tree.search(40))
        assert recorder.kinds[-1] is StepKind.FOUND
    """

    def __init__(self, fail_on: Optional[StepKind] = None):
        """Initialize the recorder.

        Args:
            fail_on: Raise RuntimeError when a step of this kind arrives
        """
        self.fail_on = fail_on
        self.events: List[StepEvent] = []
        self.values: List[Any] = []
        self.starts: List[str] = []
        self.outcomes: List[Any] = []

    def on_start(self, producer: StepProducer) -> None:
        self.starts.append(producer.label)

    def on_step(self, event: StepEvent) -> None:
        self.events.append(event)
        self.values.append(event.node.value if event.node is not None else None)
        if self.fail_on is not None and event.kind is self.fail_on:
            raise RuntimeError(f"refusing {event.kind.value}")

    def on_complete(self, outcome) -> None:
        self.outcomes.append(outcome)

    @property
    def kinds(self) -> List[StepKind]:
        return [event.kind for event in self.events]


class RecordingSleep:
    """Stand-in for asyncio.sleep that records each pause.

    Still yields to the loop once per pause so concurrent tasks interleave
    the way they would with real delays.
    """

    def __init__(self, on_sleep=None):
        self.calls: List[float] = []
        self.on_sleep = on_sleep

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self.on_sleep is not None:
            self.on_sleep(seconds)
        await asyncio.sleep(0)


def sample_tree(values: Iterable[Any] = SAMPLE_VALUES) -> BinarySearchTree:
    """Balanced seven-node tree unless other values are given."""
    return build_tree(values)


def kinds_of(producer: StepProducer) -> List[StepKind]:
    """Drain ``producer`` and return the kinds it emitted."""
    return [event.kind for event in producer]


def subtree_values(node: Optional[Node]) -> List[Any]:
    """In-order values under ``node``."""
    values: List[Any] = []
    stack: List[Node] = []
    current = node
    while stack or current is not None:
        while current is not None:
            stack.append(current)
            current = current.left
        current = stack.pop()
        values.append(current.value)
        current = current.right
    return values


def assert_bst_invariant(tree: BinarySearchTree) -> None:
    """Fail with a useful message if any node breaks the ordering rule."""
    stack = [tree.root] if tree.root is not None else []
    while stack:
        node = stack.pop()
        for value in subtree_values(node.left):
            assert value < node.value, f"{value} in left subtree of {node.value}"
        for value in subtree_values(node.right):
            assert value > node.value, f"{value} in right subtree of {node.value}"
        stack.extend(child for child in (node.left, node.right) if child is not None)
