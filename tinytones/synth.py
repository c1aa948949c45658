"""
Dual tone synthesis for tone frames.
"""

import numpy as np

from . import CLIP_LIMIT, OUTPUT_SCALE, SAMPLE_RATE


def gain_percent(gain_step: int) -> float:
    """Gain step 0-15 to percent; 0 = 6.25%, 15 = 100%."""
    return (gain_step + 1) * 6.25


def synthesize(
    freq_high: float,
    freq_low: float,
    gain: float,
    phase: int,
    sample_count: int,
) -> tuple[np.ndarray, int]:
    """
    Generate S16 audio for a frequency pair.

    Each sample is the mean of two sines evaluated at the absolute sample
    position, so output is phase continuous when the returned phase is
    passed to the next call.

    Args:
        freq_high: First frequency (Hz)
        freq_low: Second frequency (Hz); equal to freq_high for a single tone
        gain: Gain in percent (6.25 to 100)
        phase: Sample position of the first output sample
        sample_count: Number of samples to generate

    Returns:
        Tuple of (int16 samples, phase + sample_count)
    """
    positions = phase + np.arange(sample_count, dtype=np.float64)

    step_high = 2 * np.pi * freq_high / SAMPLE_RATE
    step_low = 2 * np.pi * freq_low / SAMPLE_RATE

    samples = gain * (np.sin(positions * step_high) / 2 + np.sin(positions * step_low) / 2)
    samples = np.clip(samples * OUTPUT_SCALE, -CLIP_LIMIT, CLIP_LIMIT)

    # Truncate toward zero like a C float to short cast
    return samples.astype(np.int16), phase + sample_count
