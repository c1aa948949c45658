"""
Tone index tables.

Index ranges:
- 0x00 - 0x0F: DTMF tones
- 0x10 - 0x1F: Knox tones (modified DTMF pairs for keybox release)
- 0x20 - 0x48: Musical notes G3 through B6, equal temperament (A4 = 440 Hz)

Notes are single frequencies. They are returned in both the high and low slot
so the dual tone synthesizer produces a plain sine.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# (high, low) pairs in table order: 1 2 3 4 5 6 7 8 9 * 0 # A B C D
DTMF_TONES: tuple[tuple[int, int], ...] = (
    (697, 1209),
    (697, 1336),
    (697, 1477),
    (770, 1209),
    (770, 1336),
    (770, 1477),
    (852, 1209),
    (852, 1336),
    (852, 1477),
    (941, 1209),
    (941, 1336),
    (941, 1477),
    (697, 1633),
    (770, 1633),
    (852, 1633),
    (941, 1633),
)

DTMF_DIGITS = "123456789*0#ABCD"

KNOX_TONES: tuple[tuple[int, int], ...] = (
    (697, 1633),
    (1209, 697),
    (1336, 697),
    (1477, 697),
    (1209, 770),
    (1336, 770),
    (1477, 770),
    (1209, 852),
    (1336, 852),
    (1477, 852),
    (1209, 941),
    (1336, 941),
    (1477, 941),
    (1633, 697),
    (1633, 770),
    (1633, 852),
)

NOTE_FREQUENCIES: tuple[float, ...] = (
    196.00, 207.65, 220.00, 233.08, 246.94,  # G3 - B3
    261.63, 277.18, 293.66, 311.13, 329.63, 349.23,  # C4 - F4
    369.99, 392.00, 415.30, 440.00, 466.16, 493.88,  # F#4 - B4
    523.25, 554.37, 587.33, 622.25, 659.25, 698.46,  # C5 - F5
    739.99, 783.99, 830.61, 880.00, 932.33, 987.77,  # F#5 - B5
    1046.50, 1108.73, 1174.66, 1244.51, 1318.51, 1396.91,  # C6 - F6
    1479.98, 1567.98, 1661.22, 1760.00, 1864.66, 1975.53,  # F#6 - B6
)

_PITCH_CLASSES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
_FLATS = {"DB": "C#", "EB": "D#", "GB": "F#", "AB": "G#", "BB": "A#"}

# First note in the table is G3
_FIRST_NOTE = 3 * 12 + _PITCH_CLASSES.index("G")


class ToneBank(Enum):
    """Tone bank selected by the high bits of the index."""

    DTMF = (0x00, len(DTMF_TONES))
    KNOX = (0x10, len(KNOX_TONES))
    NOTE = (0x20, len(NOTE_FREQUENCIES))

    def __init__(self, base: int, size: int):
        self.base = base
        self.size = size

    @property
    def last(self) -> int:
        return self.base + self.size - 1


MAX_INDEX = ToneBank.NOTE.last  # 0x48


@dataclass(frozen=True)
class Tone:
    """A tone index resolved to its bank and position within that bank."""

    bank: ToneBank
    offset: int

    @property
    def index(self) -> int:
        return self.bank.base + self.offset

    @property
    def frequencies(self) -> tuple[float, float]:
        """(high, low) frequency pair in Hz."""
        if self.bank is ToneBank.DTMF:
            high, low = DTMF_TONES[self.offset]
        elif self.bank is ToneBank.KNOX:
            high, low = KNOX_TONES[self.offset]
        else:
            high = low = NOTE_FREQUENCIES[self.offset]
        return float(high), float(low)

    @property
    def name(self) -> str:
        if self.bank is ToneBank.DTMF:
            return f"DTMF {DTMF_DIGITS[self.offset]}"
        if self.bank is ToneBank.KNOX:
            return f"Knox {self.offset}"
        return f"Note {_note_label(self.offset)}"


def classify(index: int) -> Optional[Tone]:
    """Resolve a tone index to its bank, or None if the index is not in any bank."""
    for bank in ToneBank:
        if bank.base <= index <= bank.last:
            return Tone(bank, index - bank.base)
    return None


def lookup(index: int) -> Optional[tuple[float, float]]:
    """Return the (high, low) frequency pair for a tone index, or None."""
    tone = classify(index)
    if tone is None:
        return None
    return tone.frequencies


def tone_name(index: int) -> str:
    tone = classify(index)
    if tone is None:
        return f"Unknown 0x{index:02X}"
    return tone.name


def _note_label(offset: int) -> str:
    semitone = _FIRST_NOTE + offset
    return f"{_PITCH_CLASSES[semitone % 12]}{semitone // 12}"


def _note_offset(text: str) -> Optional[int]:
    """Convert a note name like 'A4', 'C#5' or 'Bb3' to a table offset."""
    if len(text) < 2:
        return None
    pitch, octave = text[:-1].upper(), text[-1]
    if not octave.isdecimal():
        return None
    pitch = _FLATS.get(pitch, pitch)
    if pitch not in _PITCH_CLASSES:
        return None
    offset = int(octave) * 12 + _PITCH_CLASSES.index(pitch) - _FIRST_NOTE
    if not 0 <= offset < len(NOTE_FREQUENCIES):
        return None
    return offset


def parse_tone(text: str) -> int:
    """
    Parse a tone description to a tone index.

    Formats:
    - "5", "*", "#", "A" -> DTMF digit
    - "knox:3" -> Knox tone 3 (index 0x13)
    - "A4", "C#5", "Bb3" -> musical note
    - "0x21" -> raw index

    Args:
        text: Tone description

    Returns:
        Tone index

    Raises:
        ValueError: If the text does not name a known tone
    """
    text = text.strip()
    lowered = text.lower()

    if lowered.startswith("0x"):
        index = int(lowered, 16)
        if classify(index) is None:
            raise ValueError(f"Tone index out of range: {text}")
        return index

    if lowered.startswith("knox:"):
        position = int(lowered[5:])
        if not 0 <= position < ToneBank.KNOX.size:
            raise ValueError(f"Knox tone must be 0-{ToneBank.KNOX.size - 1}: {text}")
        return ToneBank.KNOX.base + position

    if len(text) == 1 and text.upper() in DTMF_DIGITS:
        return ToneBank.DTMF.base + DTMF_DIGITS.index(text.upper())

    offset = _note_offset(text)
    if offset is not None:
        return ToneBank.NOTE.base + offset

    raise ValueError(f"Unknown tone: {text}")
