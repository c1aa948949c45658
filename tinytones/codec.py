"""
Tone frame encoder and decoder.
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import numpy as np
import soundfile as sf

from . import MAX_GAIN_STEP, SAMPLE_RATE
from .frame import FrameClass, FrameError, ToneFrame
from .state import ToneState
from .synth import gain_percent, synthesize
from .tables import Tone, classify

# Module-level logger
_logger = logging.getLogger(__name__)


@dataclass
class DecodeResult:
    """
    Outcome of decoding one frame.

    On failure ``samples`` is silence and ``phase`` is the phase that was
    passed in.
    """

    samples: np.ndarray
    phase: int
    reason: Optional[FrameError] = None
    tone: Optional[Tone] = None
    gain_step: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.reason is None


def encode(frame_class: FrameClass, index: int, gain_step: int) -> bytes:
    """
    Build an 8 byte tone frame.

    Raises:
        IndexOutOfRangeError: If index is above MAX_INDEX
        GainOutOfRangeError: If gain_step is above 15
    """
    return ToneFrame(frame_class, index, gain_step).encode()


def decode(frame_class: FrameClass, data: bytes, phase: int = 0) -> DecodeResult:
    """
    Decode an 8 byte frame to audio if it is a tone frame.

    Args:
        frame_class: Frame class the payload came from
        data: 8 bytes of Codec2 payload
        phase: Phase returned by the previous decode of this stream

    Returns:
        DecodeResult with frame_class.samples int16 samples
    """
    frame, reason = ToneFrame.parse(frame_class, data)

    if frame is None:
        _logger.debug(f"{frame_class.name} frame {bytes(data).hex()} is not a tone: {reason.value}")
        return DecodeResult(
            samples=np.zeros(frame_class.samples, dtype=np.int16),
            phase=phase,
            reason=reason,
        )

    tone = classify(frame.index)
    freq_high, freq_low = tone.frequencies
    gain = gain_percent(frame.gain_step)

    _logger.debug(
        f"{frame_class.name} tone 0x{frame.index:02X} ({tone.name}); "
        f"gain {gain}%; F: {freq_high} / {freq_low}"
    )

    samples, phase = synthesize(freq_high, freq_low, gain, phase, frame_class.samples)
    return DecodeResult(samples=samples, phase=phase, tone=tone, gain_step=frame.gain_step)


class ToneEncoder:
    """
    Builds tone frames for one frame class.

    A tone longer than one frame is sent as a burst of identical frames.
    """

    def __init__(self, frame_class: FrameClass):
        self.frame_class = frame_class

    def encode(self, index: int, gain_step: int = MAX_GAIN_STEP) -> bytes:
        return encode(self.frame_class, index, gain_step)

    def frames_for(self, duration_ms: float) -> int:
        """Number of frames needed to cover a duration (at least one)."""
        return max(1, math.ceil(duration_ms / self.frame_class.duration_ms))

    def queue(
        self,
        state: ToneState,
        index: int,
        gain_step: int = MAX_GAIN_STEP,
        duration_ms: float = 0,
    ):
        """
        Load a tone burst into a sender state.

        Args:
            state: Sender state
            index: Tone index
            gain_step: Gain step (0 to 15)
            duration_ms: Tone length in milliseconds

        Raises:
            IndexOutOfRangeError, GainOutOfRangeError: As for encode
        """
        # Validate before touching the state
        ToneFrame(self.frame_class, index, gain_step)

        state.index = index
        state.gain_step = gain_step
        state.frames_to_send = self.frames_for(duration_ms)

        _logger.debug(
            f"Queued tone 0x{index:02X} for {state.frames_to_send} "
            f"{self.frame_class.name} frames"
        )

    def next_frame(self, state: ToneState) -> Optional[bytes]:
        """Take the next frame of a queued burst, or None if the burst is done."""
        if state.frames_to_send <= 0:
            return None
        state.frames_to_send -= 1
        return self.encode(state.index, state.gain_step)

    def burst(
        self,
        index: int,
        gain_step: int = MAX_GAIN_STEP,
        duration_ms: float = 0,
    ) -> list[bytes]:
        """Return all frames for a tone of the given duration."""
        state = ToneState()
        self.queue(state, index, gain_step, duration_ms)

        frames = []
        frame = self.next_frame(state)
        while frame is not None:
            frames.append(frame)
            frame = self.next_frame(state)
        return frames


class ToneDecoder:
    """
    Decodes tone frames for one stream, keeping phase between frames.
    """

    def __init__(self, frame_class: FrameClass, state: Optional[ToneState] = None):
        """
        Initialize decoder.

        Args:
            frame_class: Frame class of the stream
            state: Stream state (a fresh one is created if omitted)
        """
        self.frame_class = frame_class
        self.state = state if state is not None else ToneState()

    def reset(self):
        """Reset stream state."""
        self.state.reset()

    def decode(self, data: bytes) -> DecodeResult:
        result = decode(self.frame_class, data, self.state.phase)
        self.state.phase = result.phase
        return result

    def decode_stream(self, frames: Iterable[bytes]) -> np.ndarray:
        """
        Decode a sequence of frames to one continuous buffer.

        Frames that are not tone frames contribute silence.

        Returns:
            int16 samples, frame_class.samples per input frame
        """
        chunks = [self.decode(frame).samples for frame in frames]
        if not chunks:
            return np.zeros(0, dtype=np.int16)
        return np.concatenate(chunks)

    def decode_to_file(self, frames: Iterable[bytes], output_path: str | Path) -> int:
        """
        Decode frames and save the audio as a 16-bit 8 kHz WAV file.

        Returns:
            Number of samples written
        """
        samples = self.decode_stream(frames)
        write_wav(output_path, samples)
        return len(samples)


def write_wav(output_path: str | Path, samples: np.ndarray):
    """Save int16 samples as a mono 16-bit WAV at 8 kHz."""
    # Save using soundfile (supports various formats)
    sf.write(
        str(output_path),
        samples,
        SAMPLE_RATE,
        subtype='PCM_16'
    )
