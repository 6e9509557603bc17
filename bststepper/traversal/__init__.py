"""
Traversal orders for BSTStepper.

This module contains the three classic depth-first walks.
"""

from .orders import (
    inorder_steps,
    preorder_steps,
    postorder_steps,
    traversal_steps,
    TRAVERSALS,
)

__all__ = [
    'inorder_steps',
    'preorder_steps',
    'postorder_steps',
    'traversal_steps',
    'TRAVERSALS',
]
