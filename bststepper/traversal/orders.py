"""
Depth-first traversal orders for BSTStepper.

Each order yields one TRAVERSE_VISIT event per node and nothing else.
The walks keep their own explicit stack instead of nesting generators, so
a deep, unbalanced tree does not build a chain of suspended generators.
"""

from typing import Callable, Dict, List, Optional

from ..config import TraversalOrder
from ..core.events import StepEvent, StepKind
from ..core.node import Node
from ..core.producer import StepGenerator


def _visit(node: Node, visited: List) -> StepEvent:
    visited.append(node.value)
    return StepEvent(StepKind.TRAVERSE_VISIT, f"Visiting {node.value}", node=node)


def inorder_steps(root: Optional[Node]) -> StepGenerator:
    """Left subtree, node, right subtree.

    Returns the list of visited values.
    """
    visited: List = []
    stack: List[Node] = []
    current = root
    while stack or current is not None:
        while current is not None:
            stack.append(current)
            current = current.left
        current = stack.pop()
        yield _visit(current, visited)
        current = current.right
    return visited


def preorder_steps(root: Optional[Node]) -> StepGenerator:
    """Node, left subtree, right subtree.

    Returns the list of visited values.
    """
    visited: List = []
    stack: List[Node] = [root] if root is not None else []
    while stack:
        node = stack.pop()
        yield _visit(node, visited)
        # Right pushed first so left is popped first
        if node.right is not None:
            stack.append(node.right)
        if node.left is not None:
            stack.append(node.left)
    return visited


def postorder_steps(root: Optional[Node]) -> StepGenerator:
    """Left subtree, right subtree, node.

    Returns the list of visited values.
    """
    visited: List = []
    stack: List[Node] = []
    last_visited: Optional[Node] = None
    current = root
    while stack or current is not None:
        if current is not None:
            stack.append(current)
            current = current.left
            continue
        top = stack[-1]
        if top.right is not None and top.right is not last_visited:
            current = top.right
        else:
            yield _visit(top, visited)
            last_visited = stack.pop()
    return visited


TRAVERSALS: Dict[TraversalOrder, Callable[[Optional[Node]], StepGenerator]] = {
    TraversalOrder.INORDER: inorder_steps,
    TraversalOrder.PREORDER: preorder_steps,
    TraversalOrder.POSTORDER: postorder_steps,
}


def traversal_steps(root: Optional[Node], order: TraversalOrder) -> StepGenerator:
    """Dispatch to the generator for ``order``."""
    return TRAVERSALS[order](root)
