"""Audio cue consumer.

Maps every step kind to one of four chimes (or silence) through an
explicit table and hands the chime to a player callable. Synthesising the
sound is the player's job; the tone descriptions below tell it what each
chime should sound like.
"""

import logging
from collections import namedtuple
from enum import Enum
from typing import Callable, Dict, List, Optional

from ..core.events import StepEvent, StepKind
from .base import StepConsumer


logger = logging.getLogger(__name__)


class Chime(Enum):
    VISIT = "VISIT"     # a node is being looked at
    INSERT = "INSERT"   # the tree's shape is changing
    FOUND = "FOUND"     # the value was located
    ERROR = "ERROR"     # duplicate or miss


Tone = namedtuple('Tone', ['waveform', 'frequencies', 'duration'])

TONES: Dict[Chime, Tone] = {
    Chime.VISIT: Tone('sine', (440.0, 880.0), 0.1),
    Chime.INSERT: Tone('triangle', (220.0, 440.0), 0.3),
    Chime.FOUND: Tone('square', (523.25, 659.25, 783.99), 0.5),
    Chime.ERROR: Tone('sawtooth', (150.0, 100.0), 0.2),
}

# Every StepKind must appear here
CUES: Dict[StepKind, Optional[Chime]] = {
    StepKind.VISIT: Chime.VISIT,
    StepKind.VISIT_SEARCH: Chime.VISIT,
    StepKind.TRAVERSE_VISIT: Chime.VISIT,
    StepKind.INSERT_ROOT: Chime.INSERT,
    StepKind.INSERT_LEFT: Chime.INSERT,
    StepKind.INSERT_RIGHT: Chime.INSERT,
    StepKind.FOUND_DELETE: Chime.INSERT,
    StepKind.COMPLEX_DELETE: Chime.INSERT,
    StepKind.DELETE_DONE: Chime.INSERT,
    StepKind.FOUND: Chime.FOUND,
    StepKind.FOUND_DUPLICATE: Chime.ERROR,
    StepKind.NOT_FOUND: Chime.ERROR,
    StepKind.MOVE: None,
    StepKind.HIGHLIGHT_SUCCESSOR: None,
    StepKind.EMPTY: None,
}

Player = Callable[[Chime, Tone, float], None]


class AudioCueMapper(StepConsumer):
    """Plays a chime per step through an injected player.

    Args:
        player: Called as ``player(chime, tone, volume)``; None just records cues
        volume: Initial volume between 0 and 1
        enabled: Start unmuted if True
    """

    def __init__(self, player: Optional[Player] = None, volume: float = 0.3, enabled: bool = True):
        self.player = player
        self.enabled = enabled
        self.played: List[Chime] = []
        self.volume = 0.0
        self.set_volume(volume)

    def on_step(self, event: StepEvent) -> None:
        chime = CUES[event.kind]
        if chime is None or not self.enabled:
            return
        self.played.append(chime)
        if self.player is not None:
            self.player(chime, TONES[chime], self.volume)

    def set_volume(self, volume: float) -> None:
        if not 0.0 <= volume <= 1.0:
            raise ValueError(f"Volume must be between 0 and 1, got {volume}")
        self.volume = volume

    def toggle(self) -> bool:
        """Mute or unmute; returns the new enabled state."""
        self.enabled = not self.enabled
        logger.debug("Audio %s", "enabled" if self.enabled else "muted")
        return self.enabled

    @staticmethod
    def cue_for(kind: StepKind) -> Optional[Chime]:
        return CUES[kind]
