"""
Tone frame structure and serialization.
"""

import struct
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from . import (
    FRAME_BYTES,
    HEADER_BYTES,
    LEN_1600,
    LEN_3200,
    MAX_GAIN_STEP,
    SAMPLE_RATE,
    SILENCE_1600,
    SILENCE_3200,
    TONE_INDICATOR,
)
from .tables import MAX_INDEX, classify


class FrameError(Enum):
    """Reasons a frame cannot be encoded or is not a tone frame."""

    HEADER_MISMATCH = "header mismatch"
    CHECKSUM_MISMATCH = "checksum mismatch"
    NOT_TONE_INDICATOR = "not a tone indicator"
    UNKNOWN_TONE_INDEX = "unknown tone index"
    INDEX_OUT_OF_RANGE = "index out of range"
    GAIN_OUT_OF_RANGE = "gain out of range"


class FrameEncodeError(ValueError):
    """Raised when a tone frame cannot be built from the given fields."""

    reason: FrameError


class IndexOutOfRangeError(FrameEncodeError):
    reason = FrameError.INDEX_OUT_OF_RANGE


class GainOutOfRangeError(FrameEncodeError):
    reason = FrameError.GAIN_OUT_OF_RANGE


@dataclass(frozen=True)
class FrameClass:
    """
    Codec2 payload class a tone frame is carried in.

    Attributes:
        name: Codec2 mode name ("3200" or "1600")
        silence: 64-bit silence frame; the upper 40 bits form the tone header
        samples: PCM samples per frame at 8 kHz
    """

    name: str
    silence: int
    samples: int

    @property
    def header(self) -> bytes:
        """The 5 header bytes every tone frame of this class starts with."""
        return struct.pack(">Q", self.silence)[:HEADER_BYTES]

    @property
    def duration_ms(self) -> float:
        return self.samples * 1000 / SAMPLE_RATE

    @classmethod
    def from_name(cls, name: str) -> "FrameClass":
        for frame_class in (FRAME_3200, FRAME_1600):
            if frame_class.name == name:
                return frame_class
        raise ValueError(f"Unknown frame class: {name}")


FRAME_3200 = FrameClass("3200", SILENCE_3200, LEN_3200)
FRAME_1600 = FrameClass("1600", SILENCE_1600, LEN_1600)


def checksum(data: bytes) -> int:
    """One's complement of the byte sum, truncated to 8 bits."""
    return ~sum(data) & 0xFF


class ToneFrame:
    """
    Represents a single tone frame.

    Frame structure (MSB first):
    - Header: 40 bits - upper 40 bits of the class silence frame
    - Indicator: 4 bits - 0xF marks a tone frame
    - Gain Step: 4 bits - gain of (step + 1) * 6.25 percent
    - Tone Index: 8 bits - DTMF, Knox or note table entry
    - Checksum: 8 bits - inverted sum of the preceding 7 bytes

    Total: 64 bits = 8 bytes
    """

    def __init__(self, frame_class: FrameClass, index: int, gain_step: int):
        """
        Initialize a frame.

        Args:
            frame_class: FRAME_3200 or FRAME_1600
            index: Tone index (0 to MAX_INDEX)
            gain_step: Gain step (0 to 15)

        Raises:
            IndexOutOfRangeError: If the index is not in the tone table
            GainOutOfRangeError: If the gain step does not fit in 4 bits
        """
        if not 0 <= index <= MAX_INDEX:
            raise IndexOutOfRangeError(f"tone index must be 0-0x{MAX_INDEX:02X}, got {index}")
        if not 0 <= gain_step <= MAX_GAIN_STEP:
            raise GainOutOfRangeError(f"gain step must be 0-{MAX_GAIN_STEP}, got {gain_step}")

        self.frame_class = frame_class
        self.index = index
        self.gain_step = gain_step

    def encode(self) -> bytes:
        """
        Encode frame to bytes.

        Returns:
            8 bytes: header (5) + indicator/gain (1) + index (1) + checksum (1)
        """
        payload = self.frame_class.header + struct.pack(
            ">BB",
            (TONE_INDICATOR << 4) | self.gain_step,
            self.index,
        )
        return payload + struct.pack(">B", checksum(payload))

    @classmethod
    def parse(
        cls, frame_class: FrameClass, data: bytes
    ) -> tuple[Optional["ToneFrame"], Optional[FrameError]]:
        """
        Validate and parse a frame.

        Checks run in order and the first failure is reported:
        header, checksum, indicator, tone index.

        Args:
            frame_class: Expected frame class
            data: 8 bytes of Codec2 payload

        Returns:
            (frame, None) for a tone frame, (None, reason) otherwise

        Raises:
            ValueError: If data is not exactly 8 bytes
        """
        if len(data) != FRAME_BYTES:
            raise ValueError(f"Frame must be {FRAME_BYTES} bytes, got {len(data)}")

        header, control, index, check = struct.unpack(">5sBBB", bytes(data))

        if header != frame_class.header:
            return None, FrameError.HEADER_MISMATCH

        if checksum(data[:FRAME_BYTES - 1]) != check:
            return None, FrameError.CHECKSUM_MISMATCH

        if (control >> 4) != TONE_INDICATOR:
            return None, FrameError.NOT_TONE_INDICATOR

        if classify(index) is None:
            return None, FrameError.UNKNOWN_TONE_INDEX

        return cls(frame_class, index, control & 0xF), None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ToneFrame):
            return NotImplemented
        return (
            self.frame_class == other.frame_class
            and self.index == other.index
            and self.gain_step == other.gain_step
        )

    def __repr__(self) -> str:
        return (
            f"ToneFrame(class={self.frame_class.name}, "
            f"index=0x{self.index:02X}, gain_step={self.gain_step})"
        )
