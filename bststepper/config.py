"""Configuration system for BSTStepper.

This module defines how callers tune a running animation: how long the
sequencer pauses between steps, how long it lingers after the last step,
and how much history the log and toast consumers keep.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Union


SLIDER_MIN = 0
SLIDER_MAX = 100


class TraversalOrder(Enum):
    """Which classic depth-first order to walk the tree in."""
    INORDER = "inorder"       # left, node, right
    PREORDER = "preorder"     # node, left, right
    POSTORDER = "postorder"   # left, right, node

    @classmethod
    def coerce(cls, order: Union['TraversalOrder', str]) -> 'TraversalOrder':
        """Accept either an enum member or its string value.

        Args:
            order: TraversalOrder member or one of 'inorder', 'preorder', 'postorder'

        Returns:
            The matching TraversalOrder

        Raises:
            ValueError: If the order is not recognised
        """
        if isinstance(order, cls):
            return order
        try:
            return cls(str(order).lower())
        except ValueError:
            raise ValueError(f"Unknown traversal order: {order}") from None

    @property
    def title(self) -> str:
        """Human-readable name, e.g. 'Inorder'."""
        return self.value.capitalize()


@dataclass
class SequencerConfig:
    """Pacing and history settings shared by a sequencer and its consumers.

    The sequencer reads ``step_delay_ms`` at the start of every pause, so
    changing it while a sequence is running takes effect on the next step.
    """

    step_delay_ms: float = 400.0        # Pause after each dispatched step
    trailing_delay_ms: float = 1000.0   # Pause after the last step, before completion
    max_log_entries: int = 20           # Trace log keeps this many newest entries
    toast_ttl_seconds: float = 3.0      # Toasts expire after this long

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.step_delay_ms <= 0:
            errors.append("step_delay_ms must be positive")

        if self.trailing_delay_ms < 0:
            errors.append("trailing_delay_ms cannot be negative")

        if self.max_log_entries <= 0:
            errors.append("max_log_entries must be positive")

        if self.toast_ttl_seconds <= 0:
            errors.append("toast_ttl_seconds must be positive")

        return errors

    @classmethod
    def instant(cls) -> 'SequencerConfig':
        """Create config with the shortest practical pauses.

        Useful for replaying an operation without watching it.
        """
        return cls(step_delay_ms=1.0, trailing_delay_ms=0.0)


def speed_from_slider(position: float) -> float:
    """Convert a speed slider position into a step delay.

    Position 0 is the slowest setting (1000 ms per step) and 100 the
    fastest (50 ms per step).

    Args:
        position: Slider position between 0 and 100 inclusive

    Returns:
        Step delay in milliseconds

    Raises:
        ValueError: If position is outside the slider range
    """
    if not SLIDER_MIN <= position <= SLIDER_MAX:
        raise ValueError(
            f"Slider position must be between {SLIDER_MIN} and {SLIDER_MAX}, got {position}"
        )
    return 1000 - (position * 9.5)
