"""Binary search tree node.

Nodes carry a stable ``id`` assigned at creation so a renderer can keep
tracking a node across redraws, including when its value is overwritten
by a two-children delete.
"""

import itertools
from typing import Any, Optional, Protocol


# Process-wide, never reset: ids stay unique even across cleared trees
_node_ids = itertools.count(1)


class NodeRef(Protocol):
    """What consumers may rely on when handed a node by a step event.

    Only ``id`` and ``value`` are part of the contract. A reference is
    valid while its event is being handled; a later event may relink or
    drop the node.
    """

    id: int
    value: Any


class Node:
    """A single node in the tree.

    The tree owns every node. Equality is identity: two nodes holding the
    same value are still different nodes.
    """

    def __init__(self, value: Any):
        self.value = value
        self.left: Optional['Node'] = None
        self.right: Optional['Node'] = None
        self.id = next(_node_ids)

    @property
    def child_count(self) -> int:
        """Number of non-empty children (0, 1 or 2)."""
        return (self.left is not None) + (self.right is not None)

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __repr__(self) -> str:
        return f"Node(id={self.id}, value={self.value!r})"
