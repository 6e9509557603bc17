"""Step consumers for BSTStepper.

Each consumer turns the same step sequence into a different view:
highlight state for a renderer, audio cues, a trace log and toasts.
"""

from .base import StepConsumer, CallbackConsumer
from .highlight import HighlightTracker, Highlight
from .audio import AudioCueMapper, Chime, Tone, CUES, TONES
from .trace import TraceLog, LogEntry
from .toast import ToastBoard, Toast

__all__ = [
    # Base
    'StepConsumer',
    'CallbackConsumer',
    # Renderer state
    'HighlightTracker',
    'Highlight',
    # Audio
    'AudioCueMapper',
    'Chime',
    'Tone',
    'CUES',
    'TONES',
    # Log
    'TraceLog',
    'LogEntry',
    # Toasts
    'ToastBoard',
    'Toast',
]
