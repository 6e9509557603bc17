"""Asynchronous sequencing for BSTStepper.

This package drives step producers on an asyncio loop with pacing between
steps and a single-flight guard around the tree.
"""

from .sequencer import (
    AsyncSequencer,
    SequenceOutcome,
    SequenceStatus,
)
from .error_policies import (
    ErrorPolicy,
    FailFastPolicy,
    ContinueOnErrorsPolicy,
    ThresholdPolicy,
)

__all__ = [
    # Sequencer
    'AsyncSequencer',
    'SequenceOutcome',
    'SequenceStatus',
    # Error policies
    'ErrorPolicy',
    'FailFastPolicy',
    'ContinueOnErrorsPolicy',
    'ThresholdPolicy',
]
