"""Testing utilities for BSTStepper consumers."""

from .fixtures import (
    RecordingConsumer,
    RecordingSleep,
    SAMPLE_VALUES,
    sample_tree,
    kinds_of,
    subtree_values,
    assert_bst_invariant,
)

__all__ = [
    'RecordingConsumer',
    'RecordingSleep',
    'SAMPLE_VALUES',
    'sample_tree',
    'kinds_of',
    'subtree_values',
    'assert_bst_invariant',
]
