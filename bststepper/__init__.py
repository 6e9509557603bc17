"""BSTStepper - Step-by-step binary search tree animations.

BSTStepper stages every tree operation as a sequence of discrete steps
("visit this node", "insert here", "found successor") and replays them
through a paced, single-flight sequencer to any number of consumers.

Typical use:
━━━━━━━━━━━━━━━━━━━━━━━━━━
Instant:
    from bststepper import BinarySearchTree
    tree.insert(42).drain()

Animated:
    from bststepper import TreeSession
    await session.insert(42)
━━━━━━━━━━━━━━━━━━━━━━━━━━

The tree never knows who is watching; renderers, audio and logs are all
just consumers of the same steps.
"""

__version__ = "0.3.0"

from . import core
from . import aio
from . import consumers

from .config import SequencerConfig, TraversalOrder, speed_from_slider
from .errors import BSTStepperError, ConsumerFault, SequencerBusyError
from .core import BinarySearchTree, Node, StepEvent, StepKind, StepProducer
from .aio import AsyncSequencer, SequenceOutcome, SequenceStatus
from .api import TreeSession, animate, build_tree

__all__ = [
    "__version__",
    "core",
    "aio",
    "consumers",
    # Configuration
    "SequencerConfig",
    "TraversalOrder",
    "speed_from_slider",
    # Errors
    "BSTStepperError",
    "ConsumerFault",
    "SequencerBusyError",
    # Tree and steps
    "BinarySearchTree",
    "Node",
    "StepEvent",
    "StepKind",
    "StepProducer",
    # Sequencing
    "AsyncSequencer",
    "SequenceOutcome",
    "SequenceStatus",
    # High-level API
    "TreeSession",
    "animate",
    "build_tree",
]
