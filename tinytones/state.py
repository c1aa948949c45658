"""
Per-stream tone state.
"""

from dataclasses import dataclass

from . import MAX_GAIN_STEP


@dataclass
class ToneState:
    """
    Tone state for one stream.

    A receiver threads ``phase`` between decode calls so that consecutive
    tone frames join without a click. A sender keeps the tone it is
    transmitting and how many frames of it are left.

    Streams must not share a ToneState.
    """

    phase: int = 0
    index: int = 0
    gain_step: int = MAX_GAIN_STEP
    frames_to_send: int = 0

    def reset(self):
        """Reset to the start of a session."""
        self.phase = 0
        self.index = 0
        self.gain_step = MAX_GAIN_STEP
        self.frames_to_send = 0
