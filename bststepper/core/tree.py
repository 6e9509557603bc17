"""Step-emitting binary search tree.

The tree never performs insert, search, delete or traversal atomically.
Each of those returns a StepProducer; the tree changes only as the
producer is pulled. ``clear()`` is the one immediate operation.
"""

from typing import Any, Iterator, List, Optional, Union

from ..config import TraversalOrder
from ..traversal.orders import traversal_steps
from .node import Node
from .operations import delete_steps, insert_steps, search_steps
from .producer import StepGenerator, StepProducer


class BinarySearchTree:
    """A plain, unbalanced binary search tree of distinct, comparable values.

    For every node, values in the left subtree are smaller and values in
    the right subtree are larger. Duplicate inserts are reported with a
    FOUND_DUPLICATE step and leave the tree unchanged.
    """

    def __init__(self):
        self.root: Optional[Node] = None

    # Staged operations

    def insert(self, value: Any) -> StepProducer:
        """Producer that inserts ``value``; result is True if a node was added."""
        return StepProducer(insert_steps(self, value), 'insert', f"Inserting {value}")

    def search(self, value: Any) -> StepProducer:
        """Producer that looks for ``value``; result is True if found."""
        return StepProducer(search_steps(self, value), 'search', f"Searching for {value}")

    def delete(self, value: Any) -> StepProducer:
        """Producer that removes ``value``; result is True if a node was removed."""
        return StepProducer(delete_steps(self, value), 'delete', f"Deleting {value}")

    def traverse(self, order: Union[TraversalOrder, str] = TraversalOrder.INORDER) -> StepProducer:
        """Producer that visits every node in ``order``.

        Result is the list of visited values.

        Raises:
            ValueError: If ``order`` is not a known traversal order
        """
        order = TraversalOrder.coerce(order)
        return StepProducer(
            self._traversal_steps(order),
            order.value,
            f"{order.title} Traversal",
        )

    def inorder(self) -> StepProducer:
        return self.traverse(TraversalOrder.INORDER)

    def preorder(self) -> StepProducer:
        return self.traverse(TraversalOrder.PREORDER)

    def postorder(self) -> StepProducer:
        return self.traverse(TraversalOrder.POSTORDER)

    def _traversal_steps(self, order: TraversalOrder) -> StepGenerator:
        # Root is read on the first pull, not when the producer is created
        return (yield from traversal_steps(self.root, order))

    # Immediate operations

    def clear(self) -> None:
        """Drop every node."""
        self.root = None

    # Inspection

    def values(self) -> List[Any]:
        """All values in ascending order."""
        return list(self)

    def nodes(self) -> Iterator[Node]:
        """Iterate nodes in order without emitting steps."""
        stack: List[Node] = []
        current = self.root
        while stack or current is not None:
            while current is not None:
                stack.append(current)
                current = current.left
            current = stack.pop()
            yield current
            current = current.right

    def find_node(self, value: Any) -> Optional[Node]:
        """Return the node holding ``value`` without emitting steps."""
        current = self.root
        while current is not None:
            if value == current.value:
                return current
            current = current.left if value < current.value else current.right
        return None

    def contains(self, value: Any) -> bool:
        return self.find_node(value) is not None

    @property
    def size(self) -> int:
        return sum(1 for _ in self.nodes())

    @property
    def height(self) -> int:
        """Number of levels; 0 for an empty tree."""
        if self.root is None:
            return 0
        height = 0
        level = [self.root]
        while level:
            height += 1
            level = [child for node in level for child in (node.left, node.right) if child is not None]
        return height

    def is_empty(self) -> bool:
        return self.root is None

    def is_valid(self) -> bool:
        """Check the ordering invariant over the whole tree."""
        stack = [(self.root, None, None)]
        while stack:
            node, low, high = stack.pop()
            if node is None:
                continue
            if low is not None and not low < node.value:
                return False
            if high is not None and not node.value < high:
                return False
            stack.append((node.left, low, node.value))
            stack.append((node.right, node.value, high))
        return True

    def __len__(self) -> int:
        return self.size

    def __contains__(self, value: Any) -> bool:
        return self.contains(value)

    def __iter__(self) -> Iterator[Any]:
        for node in self.nodes():
            yield node.value

    def __repr__(self) -> str:
        return f"BinarySearchTree({self.values()!r})"
