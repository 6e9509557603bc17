"""Step generators for insert, search and delete.

Each generator mutates the tree at the moment it yields the matching
event: by the time a consumer sees INSERT_LEFT the new node is already
linked, and by the time it sees DELETE_DONE the node is already gone.
Nothing happens until the first event is pulled.
"""

from typing import TYPE_CHECKING, Any, Optional

from .events import StepEvent, StepKind
from .node import Node
from .producer import StepGenerator

if TYPE_CHECKING:
    from .tree import BinarySearchTree


def insert_steps(tree: 'BinarySearchTree', value: Any) -> StepGenerator:
    """Insert ``value``, descending from the root one comparison at a time.

    Returns True if a node was added, False for a duplicate.
    """
    if tree.root is None:
        tree.root = Node(value)
        yield StepEvent(StepKind.INSERT_ROOT, f"Inserting root: {value}", node=tree.root)
        return True

    current = tree.root
    while True:
        yield StepEvent(StepKind.VISIT, f"Comparing {value} with {current.value}", node=current)

        if value == current.value:
            yield StepEvent(StepKind.FOUND_DUPLICATE, f"{value} already exists", node=current)
            return False

        if value < current.value:
            if current.left is None:
                current.left = Node(value)
                yield StepEvent(
                    StepKind.INSERT_LEFT,
                    f"{value} < {current.value}, inserting left",
                    node=current.left,
                    parent_node=current,
                )
                return True
            current = current.left
        else:
            if current.right is None:
                current.right = Node(value)
                yield StepEvent(
                    StepKind.INSERT_RIGHT,
                    f"{value} > {current.value}, inserting right",
                    node=current.right,
                    parent_node=current,
                )
                return True
            current = current.right


def search_steps(tree: 'BinarySearchTree', value: Any) -> StepGenerator:
    """Look for ``value``; returns True if found."""
    current = tree.root
    if current is None:
        yield StepEvent(StepKind.EMPTY, "Tree is empty")
        return False

    while current is not None:
        yield StepEvent(StepKind.VISIT_SEARCH, f"Checking {current.value}", node=current)

        if value == current.value:
            yield StepEvent(StepKind.FOUND, f"Found {value}!", node=current)
            return True

        if value < current.value:
            yield StepEvent(StepKind.MOVE, f"{value} < {current.value}, go left")
            current = current.left
        else:
            yield StepEvent(StepKind.MOVE, f"{value} > {current.value}, go right")
            current = current.right

    yield StepEvent(StepKind.NOT_FOUND, f"{value} not found in tree")
    return False


def delete_steps(tree: 'BinarySearchTree', value: Any) -> StepGenerator:
    """Remove ``value``; returns True if a node was removed.

    A node with two children is not unlinked. Its value is overwritten with
    the in-order successor's value and the successor is unlinked instead,
    so the surviving node keeps its id.
    """
    if tree.root is None:
        yield StepEvent(StepKind.EMPTY, "Tree is empty")
        return False

    parent: Optional[Node] = None
    node = tree.root
    while node is not None:
        yield StepEvent(StepKind.VISIT, f"Visiting {node.value}", node=node)
        if value < node.value:
            parent, node = node, node.left
        elif value > node.value:
            parent, node = node, node.right
        else:
            break
    else:
        yield StepEvent(StepKind.NOT_FOUND, f"{value} not found")
        return False

    yield StepEvent(StepKind.FOUND_DELETE, f"Found {value}, deleting...", node=node, parent_node=parent)

    if node.left is None and node.right is None:
        _replace_child(tree, parent, node, None)
        yield StepEvent(StepKind.DELETE_DONE, f"Removed leaf node {value}", node=node, parent_node=parent)
    elif node.left is None:
        _replace_child(tree, parent, node, node.right)
        yield StepEvent(StepKind.DELETE_DONE, f"Replaced {value} with right child", node=node, parent_node=parent)
    elif node.right is None:
        _replace_child(tree, parent, node, node.left)
        yield StepEvent(StepKind.DELETE_DONE, f"Replaced {value} with left child", node=node, parent_node=parent)
    else:
        yield from _delete_with_successor(node)
    return True


def _delete_with_successor(node: Node) -> StepGenerator:
    """Two-children case: copy the successor's value up, then unlink it.

    The successor is the leftmost node of the right subtree, so it has no
    left child and is unlinked by pointing its parent at its right child.
    """
    yield StepEvent(StepKind.COMPLEX_DELETE, "Node has two children. Finding successor...")

    successor_parent = node
    successor = node.right
    while successor.left is not None:
        successor_parent = successor
        successor = successor.left

    yield StepEvent(
        StepKind.HIGHLIGHT_SUCCESSOR,
        f"Successor is {successor.value}",
        node=successor,
        parent_node=successor_parent,
    )

    # Value first, relink second
    node.value = successor.value
    if successor_parent is node:
        successor_parent.right = successor.right
    else:
        successor_parent.left = successor.right

    yield StepEvent(
        StepKind.DELETE_DONE,
        "Replaced value and removed successor",
        node=successor,
        parent_node=successor_parent,
        is_swap=True,
        updated_value=node.value,
        original_node=node,
    )


def _replace_child(tree: 'BinarySearchTree', parent: Optional[Node], node: Node,
                   child: Optional[Node]) -> None:
    """Put ``child`` where ``node`` hangs, or make it the root."""
    if parent is None:
        tree.root = child
    elif parent.left is node:
        parent.left = child
    else:
        parent.right = child
