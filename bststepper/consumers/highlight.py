"""Highlight tracking consumer.

Keeps the per-node visual state a renderer needs, keyed by node id:
which nodes are highlighted and how, which were visited by the current
traversal, and the label each node should show. Drawing is left to the
renderer; this consumer only says what to draw.
"""

from enum import Enum
from typing import Any, Dict, Optional, Set

from ..core.events import StepEvent, StepKind
from ..core.node import Node
from ..core.producer import StepProducer
from ..core.tree import BinarySearchTree
from .base import StepConsumer


class Highlight(Enum):
    VISIT = "highlight-visit"
    FOUND = "highlight-found"
    ACTIVE = "highlight-active-cursor"


# Kinds not listed clear a node's transient highlight without setting one
HIGHLIGHTS: Dict[StepKind, Highlight] = {
    StepKind.VISIT: Highlight.VISIT,
    StepKind.VISIT_SEARCH: Highlight.VISIT,
    StepKind.FOUND: Highlight.FOUND,
    StepKind.FOUND_DELETE: Highlight.FOUND,
    StepKind.TRAVERSE_VISIT: Highlight.ACTIVE,
}


class HighlightTracker(StepConsumer):
    """Per-node highlight and label state for a renderer.

    Structural steps re-read the tree and reconcile nodes by id, so a
    two-children delete shows up as one node relabelled and one node
    removed, never as a node moving.
    """

    def __init__(self, tree: BinarySearchTree):
        self.tree = tree
        self.highlights: Dict[int, Highlight] = {}
        self.visited: Set[int] = set()
        self.labels: Dict[int, Any] = {}
        self.added: Set[int] = set()
        self.removed: Set[int] = set()
        self.relabelled: Set[int] = set()
        self.revision = 0
        self.sync()

    def on_start(self, producer: StepProducer) -> None:
        self.clear_highlights()

    def on_step(self, event: StepEvent) -> None:
        if event.is_structural:
            self.sync()
        if event.node is not None:
            self.highlight(event.node, event.kind)
        if event.kind is StepKind.TRAVERSE_VISIT:
            self.visited.add(event.node.id)

    def on_complete(self, outcome) -> None:
        self.clear_highlights()

    def highlight(self, node: Node, kind: StepKind) -> Optional[Highlight]:
        """Replace the node's transient highlight with the one for ``kind``.

        Visited marks are kept. Nodes no longer in the tree are ignored.
        """
        if node.id not in self.labels:
            return None
        self.highlights.pop(node.id, None)
        highlight = HIGHLIGHTS.get(kind)
        if highlight is not None:
            self.highlights[node.id] = highlight
        return highlight

    def clear_highlights(self) -> None:
        self.highlights.clear()
        self.visited.clear()

    def sync(self) -> None:
        """Re-read the tree and record what changed since the last sync."""
        labels = {node.id: node.value for node in self.tree.nodes()}
        previous = self.labels
        self.added = set(labels) - set(previous)
        self.removed = set(previous) - set(labels)
        self.relabelled = {
            node_id for node_id in set(labels) & set(previous)
            if labels[node_id] != previous[node_id]
        }
        for node_id in self.removed:
            self.highlights.pop(node_id, None)
            self.visited.discard(node_id)
        self.labels = labels
        self.revision += 1

    def state_of(self, node: Node) -> Set[str]:
        """CSS-style classes a renderer would put on ``node``."""
        classes = set()
        if node.id in self.highlights:
            classes.add(self.highlights[node.id].value)
        if node.id in self.visited:
            classes.add("highlight-visited")
        return classes

    def is_clean(self) -> bool:
        """True when nothing is highlighted or marked visited."""
        return not self.highlights and not self.visited
