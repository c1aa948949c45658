"""
Tiny Tones - DTMF, Knox and musical note tones carried in Codec2 voice frames.
"""

__version__ = "0.1.0"

# Audio constants
SAMPLE_RATE = 8000  # Hz, mono S16
OUTPUT_SCALE = 25  # float to short gain, leaves headroom below full scale
CLIP_LIMIT = 32760

# Silence frames (only the upper 40 bits appear on the wire)
SILENCE_3200 = 0x010009439CE42108
SILENCE_1600 = 0x010004002575DDF2
LEN_3200 = 160  # samples per 20 ms frame
LEN_1600 = 320  # samples per 40 ms frame

# Frame structure
FRAME_BYTES = 8
HEADER_BYTES = 5
TONE_INDICATOR = 0xF
MAX_GAIN_STEP = 0xF

from .tables import (
    MAX_INDEX,
    Tone,
    ToneBank,
    classify,
    lookup,
    parse_tone,
    tone_name,
)
from .frame import (
    FRAME_1600,
    FRAME_3200,
    FrameClass,
    FrameEncodeError,
    FrameError,
    GainOutOfRangeError,
    IndexOutOfRangeError,
    ToneFrame,
    checksum,
)
from .synth import gain_percent, synthesize
from .state import ToneState
from .codec import DecodeResult, ToneDecoder, ToneEncoder, decode, encode, write_wav

__all__ = [
    "MAX_INDEX",
    "Tone",
    "ToneBank",
    "classify",
    "lookup",
    "parse_tone",
    "tone_name",
    "FRAME_1600",
    "FRAME_3200",
    "FrameClass",
    "FrameEncodeError",
    "FrameError",
    "GainOutOfRangeError",
    "IndexOutOfRangeError",
    "ToneFrame",
    "checksum",
    "gain_percent",
    "synthesize",
    "ToneState",
    "DecodeResult",
    "ToneDecoder",
    "ToneEncoder",
    "decode",
    "encode",
    "write_wav",
]
