"""High-level API for BSTStepper.

TreeSession bundles a tree, a sequencer and the standard consumers into
the object a front end talks to: one method per button, a busy flag for
disabling controls, and a status line.
"""

import logging
import random
from typing import Any, Iterable, Optional, Union

from .aio.error_policies import ErrorPolicy
from .aio.sequencer import AsyncSequencer, SequenceOutcome, SleepFunc
from .config import SequencerConfig, TraversalOrder, speed_from_slider
from .consumers.audio import AudioCueMapper, Player
from .consumers.highlight import HighlightTracker
from .consumers.toast import ToastBoard
from .consumers.trace import TraceLog
from .core.producer import StepProducer
from .core.tree import BinarySearchTree


logger = logging.getLogger(__name__)

RANDOM_VALUE_RANGE = (0, 99)

STATUS_READY = "Ready"
STATUS_RUNNING = "Running..."
STATUS_EMPTY = "Tree Empty"


class TreeSession:
    """An animated tree with its sequencer and standard consumers.

    Args:
        config: Pacing and history settings
        tree: Tree to animate (a new empty one by default)
        audio_player: Player for audio cues; None records cues only
        error_policy: Consumer error policy for the sequencer
        sleep: Pause coroutine for the sequencer (tests inject a fake)
        rng: Random source for random inserts and seeding
    """

    def __init__(
        self,
        config: Optional[SequencerConfig] = None,
        tree: Optional[BinarySearchTree] = None,
        audio_player: Optional[Player] = None,
        error_policy: Optional[ErrorPolicy] = None,
        sleep: Optional[SleepFunc] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or SequencerConfig()
        self.tree = tree if tree is not None else BinarySearchTree()
        self.sequencer = AsyncSequencer(self.config, error_policy=error_policy, sleep=sleep)
        self.rng = rng or random.Random()

        self.highlights = HighlightTracker(self.tree)
        self.audio = AudioCueMapper(audio_player)
        self.trace = TraceLog(self.config.max_log_entries)
        self.toasts = ToastBoard(self.config.toast_ttl_seconds)
        for consumer in (self.highlights, self.audio, self.trace, self.toasts):
            self.sequencer.add_consumer(consumer)
        self.sequencer.add_completion_listener(self._on_complete)

        self.status = STATUS_READY if self.tree.root is not None else STATUS_EMPTY
        self.last_outcome: Optional[SequenceOutcome] = None

    @property
    def busy(self) -> bool:
        """True while an animation runs; controls should be disabled."""
        return self.sequencer.busy

    # Animated operations

    async def insert(self, value: Any) -> SequenceOutcome:
        return await self.run(self.tree.insert(value))

    async def insert_random(self) -> SequenceOutcome:
        value = self.rng.randint(*RANDOM_VALUE_RANGE)
        producer = self.tree.insert(value)
        producer.label = f"Inserting Random {value}"
        return await self.run(producer)

    async def delete(self, value: Any) -> SequenceOutcome:
        return await self.run(self.tree.delete(value))

    async def search(self, value: Any) -> SequenceOutcome:
        """Animate a search; ``outcome.result`` is True if found."""
        return await self.run(self.tree.search(value))

    async def traverse(self, order: Union[TraversalOrder, str] = TraversalOrder.INORDER) -> SequenceOutcome:
        """Animate a traversal; ``outcome.result`` is the visited values."""
        return await self.run(self.tree.traverse(order))

    async def run(self, producer: StepProducer) -> SequenceOutcome:
        """Animate any producer built from this session's tree."""
        if not self.busy:
            self.status = STATUS_RUNNING
        return await self.sequencer.run(producer)

    # Immediate operations

    def clear(self) -> bool:
        """Drop the whole tree at once.

        Returns:
            False if refused because an animation is running
        """
        if self.busy:
            logger.info("Refusing to clear while %r is running", self.sequencer.current.label)
            return False
        self.tree.clear()
        self.highlights.sync()
        self.trace.log("Tree cleared", 'system')
        self.status = STATUS_EMPTY
        return True

    def quick_insert(self, value: Any) -> bool:
        """Insert without animating; returns True if a node was added."""
        if self.busy:
            raise RuntimeError("Cannot modify the tree while an animation is running")
        inserted = self.tree.insert(value).drain()
        self.highlights.sync()
        return inserted

    def seed(self, values: Iterable[Any]) -> int:
        """Quick-insert several values; returns how many were added."""
        added = sum(1 for value in values if self.quick_insert(value))
        if self.tree.root is not None:
            self.status = STATUS_READY
        return added

    def seed_random(self, count: int = 5) -> int:
        """Start from a small random tree, as the application does on launch."""
        self.trace.log("Initializing random tree...", 'system')
        added = self.seed(self.rng.randint(*RANDOM_VALUE_RANGE) for _ in range(count))
        self.status = STATUS_READY
        return added

    # Settings

    def set_speed(self, slider_position: float) -> float:
        """Apply a 0-100 speed slider position; returns the new step delay."""
        delay = speed_from_slider(slider_position)
        self.sequencer.step_delay_ms = delay
        return delay

    def toggle_audio(self) -> bool:
        enabled = self.audio.toggle()
        self.trace.log("Audio enabled" if enabled else "Audio muted")
        return enabled

    def _on_complete(self, outcome: SequenceOutcome) -> None:
        self.last_outcome = outcome
        self.status = STATUS_READY


async def animate(producer: StepProducer, *consumers, config: Optional[SequencerConfig] = None,
                  sleep: Optional[SleepFunc] = None) -> SequenceOutcome:
    """Run one producer through a throwaway sequencer.

    Example:
        >>> tree = build_tree([50, 30, 70])
        >>> outcome = await animate(tree.search(30), print)
        >>> outcome.result
        True
    """
    sequencer = AsyncSequencer(config, consumers=list(consumers), sleep=sleep)
    return await sequencer.run(producer)


def build_tree(values: Iterable[Any]) -> BinarySearchTree:
    """Build a tree by inserting ``values`` in order without animating."""
    tree = BinarySearchTree()
    for value in values:
        tree.insert(value).drain()
    return tree
