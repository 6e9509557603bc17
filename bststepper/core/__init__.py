"""Core abstractions for BSTStepper.

This module contains the tree, its nodes, the step event vocabulary and
the producers that stage every operation as a sequence of steps.
"""

from .node import Node, NodeRef
from .events import (
    StepKind,
    StepEvent,
    INSERT_KINDS,
    STRUCTURAL_KINDS,
    VISIT_KINDS,
    DELETE_KINDS,
    MISS_KINDS,
)
from .producer import StepProducer, drain
from .tree import BinarySearchTree

__all__ = [
    # Nodes
    'Node',
    'NodeRef',
    # Events
    'StepKind',
    'StepEvent',
    'INSERT_KINDS',
    'STRUCTURAL_KINDS',
    'VISIT_KINDS',
    'DELETE_KINDS',
    'MISS_KINDS',
    # Producers
    'StepProducer',
    'drain',
    # Tree
    'BinarySearchTree',
]
