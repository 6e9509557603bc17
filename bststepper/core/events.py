"""Step event vocabulary.

Every tree operation reports its progress as a sequence of StepEvents.
The set of kinds is closed; consumers group kinds through the explicit
category sets below instead of matching on substrings of the kind name.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

from .node import Node


class StepKind(Enum):
    """Every kind of step an operation can emit."""
    # Insert
    INSERT_ROOT = "INSERT_ROOT"
    INSERT_LEFT = "INSERT_LEFT"
    INSERT_RIGHT = "INSERT_RIGHT"
    FOUND_DUPLICATE = "FOUND_DUPLICATE"
    # Shared by insert and delete descent
    VISIT = "VISIT"
    # Search
    VISIT_SEARCH = "VISIT_SEARCH"
    MOVE = "MOVE"
    FOUND = "FOUND"
    # Delete
    FOUND_DELETE = "FOUND_DELETE"
    COMPLEX_DELETE = "COMPLEX_DELETE"
    HIGHLIGHT_SUCCESSOR = "HIGHLIGHT_SUCCESSOR"
    DELETE_DONE = "DELETE_DONE"
    # Terminal misses
    NOT_FOUND = "NOT_FOUND"
    EMPTY = "EMPTY"
    # Traversal
    TRAVERSE_VISIT = "TRAVERSE_VISIT"


INSERT_KINDS: FrozenSet[StepKind] = frozenset({
    StepKind.INSERT_ROOT,
    StepKind.INSERT_LEFT,
    StepKind.INSERT_RIGHT,
})

# Steps at which the tree's shape changed
STRUCTURAL_KINDS: FrozenSet[StepKind] = INSERT_KINDS | {StepKind.DELETE_DONE}

VISIT_KINDS: FrozenSet[StepKind] = frozenset({
    StepKind.VISIT,
    StepKind.VISIT_SEARCH,
    StepKind.TRAVERSE_VISIT,
})

DELETE_KINDS: FrozenSet[StepKind] = frozenset({
    StepKind.FOUND_DELETE,
    StepKind.COMPLEX_DELETE,
    StepKind.DELETE_DONE,
})

MISS_KINDS: FrozenSet[StepKind] = frozenset({
    StepKind.FOUND_DUPLICATE,
    StepKind.NOT_FOUND,
    StepKind.EMPTY,
})


@dataclass(frozen=True)
class StepEvent:
    """One observable unit of progress.

    Node references are the tree's own nodes, never copies. A consumer that
    wants to remember a value must read it while handling the event.
    """

    kind: StepKind
    message: str
    node: Optional[Node] = None
    parent_node: Optional[Node] = None
    is_swap: bool = False
    updated_value: Any = None
    original_node: Optional[Node] = None

    @property
    def is_structural(self) -> bool:
        """True if the tree's shape changed at this step."""
        return self.kind in STRUCTURAL_KINDS

    def to_dict(self) -> Dict[str, Any]:
        """Boundary representation with only the fields that are set.

        Keys follow the wire shape consumed by renderers:
        ``kind``, ``message``, ``node``, ``parentNode``, ``isSwap``,
        ``updatedValue``, ``originalNode``.
        """
        data: Dict[str, Any] = {'kind': self.kind.value, 'message': self.message}
        if self.node is not None:
            data['node'] = self.node
        if self.parent_node is not None:
            data['parentNode'] = self.parent_node
        if self.is_swap:
            data['isSwap'] = True
            data['updatedValue'] = self.updated_value
        if self.original_node is not None:
            data['originalNode'] = self.original_node
        return data

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"
