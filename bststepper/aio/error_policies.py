"""
Consumer error policies for BSTStepper.

This module decides what the sequencer does when a consumer raises while
handling a step. A policy either re-raises the ConsumerFault, which aborts
the rest of the sequence, or records it and lets dispatch continue.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..errors import ConsumerFault


logger = logging.getLogger(__name__)


class ErrorPolicy(ABC):
    """
    Base class for consumer error policies.

    Subclasses implement different strategies for handling a consumer
    that fails mid-sequence.
    """

    @abstractmethod
    def handle(self, fault: ConsumerFault) -> None:
        """
        Handle a consumer fault.

        Args:
            fault: The wrapped failure, with ``consumer``, ``event`` and ``error``

        Raises:
            ConsumerFault: To abort the remainder of the sequence
        """
        pass

    def reset(self) -> None:
        """Forget any state kept from earlier sequences."""


class FailFastPolicy(ErrorPolicy):
    """
    Policy that aborts the sequence on the first consumer fault.

    This is the default. Remaining steps are not produced, so the tree is
    left exactly as the last dispatched step described it.
    """

    def handle(self, fault: ConsumerFault) -> None:
        """Re-raise the fault immediately."""
        raise fault


class ContinueOnErrorsPolicy(ErrorPolicy):
    """
    Policy that records consumer faults and keeps dispatching.

    Faults are collected for later inspection. Useful when one decorative
    consumer (say, audio) should not be able to stop the animation.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log a warning for each fault
        """
        self.errors: List[Dict[str, Any]] = []
        self.verbose = verbose

    def handle(self, fault: ConsumerFault) -> None:
        """Record the fault and return so dispatch continues."""
        self.errors.append({
            'consumer': type(fault.consumer).__name__,
            'kind': fault.event.kind.value if fault.event is not None else None,
            'error': fault.error,
            'error_type': type(fault.error).__name__,
            'error_message': str(fault.error),
        })
        if self.verbose:
            logger.warning("Ignoring consumer fault: %s", fault)

    def reset(self) -> None:
        self.errors.clear()

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about faults encountered.

        Returns:
            Dictionary with fault counts per consumer and full details
        """
        by_consumer: Dict[str, int] = {}
        for record in self.errors:
            by_consumer[record['consumer']] = by_consumer.get(record['consumer'], 0) + 1
        return {
            'total_errors': len(self.errors),
            'by_consumer': by_consumer,
            'errors': self.errors,
        }


class ThresholdPolicy(ErrorPolicy):
    """
    Policy that tolerates faults up to a threshold, then aborts.

    Useful when an occasional fault is acceptable but a consumer failing
    on every step indicates it is broken.
    """

    def __init__(self, max_errors: int = 3, verbose: bool = True):
        """
        Initialize threshold policy.

        Args:
            max_errors: Faults tolerated before aborting (until reset)
            verbose: If True, log a warning for each tolerated fault
        """
        if max_errors < 0:
            raise ValueError("max_errors cannot be negative")
        self.max_errors = max_errors
        self.error_count = 0
        self.verbose = verbose
        self.errors: List[ConsumerFault] = []

    def handle(self, fault: ConsumerFault) -> None:
        """Tolerate the fault if under threshold, otherwise re-raise it."""
        self.error_count += 1
        self.errors.append(fault)

        if self.error_count > self.max_errors:
            logger.error("Consumer fault threshold exceeded (%d faults)", self.max_errors)
            raise fault

        if self.verbose:
            logger.warning("Consumer fault [%d/%d]: %s", self.error_count, self.max_errors, fault)

    def reset(self) -> None:
        self.error_count = 0
        self.errors.clear()
