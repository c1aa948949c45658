#!/usr/bin/env python3
"""
Tiny Tones Decoder CLI - Decode hex tone frames to audio.
"""

import logging
import sys

import click
import numpy as np

from tinytones import (
    FRAME_BYTES,
    FrameClass,
    ToneDecoder,
    ToneState,
    gain_percent,
    write_wav,
)


def parse_frame(text: str) -> bytes:
    """Parse a hex frame, allowing spaces and a 0x prefix."""
    text = text.replace(" ", "").replace(":", "")
    if text.lower().startswith("0x"):
        text = text[2:]
    data = bytes.fromhex(text)
    if len(data) != FRAME_BYTES:
        raise ValueError(f"frame must be {FRAME_BYTES} bytes, got {len(data)}")
    return data


@click.command()
@click.argument("frames", nargs=-1, required=True)
@click.option(
    "-m", "--mode",
    type=click.Choice(["3200", "1600"]),
    default="3200",
    help="Codec2 mode of the frames (default: 3200)",
)
@click.option(
    "-p", "--phase",
    type=int,
    default=0,
    help="Starting phase in samples (default: 0)",
)
@click.option(
    "-o", "--output",
    type=click.Path(),
    help="Write decoded audio to a WAV file",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
def main(frames: tuple[str, ...], mode: str, phase: int, output: str | None, verbose: bool):
    """
    Decode Codec2 payload frames given as hex.

    Frames that are not tone frames decode to silence.

    Examples:

        tinytones-decode 010009439CFF0017

        tinytones-decode -m 1600 -o tone.wav 0100040025FF2EA8 0100040025FF2EA8
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    try:
        payloads = [parse_frame(text) for text in frames]
    except ValueError as e:
        click.echo(f"Error parsing frame: {e}", err=True)
        sys.exit(1)

    decoder = ToneDecoder(FrameClass.from_name(mode), ToneState(phase=phase))

    chunks = []
    tone_count = 0
    for payload in payloads:
        result = decoder.decode(payload)
        chunks.append(result.samples)

        if result.ok:
            tone_count += 1
            click.echo(
                f"  {payload.hex().upper()} -> {result.tone.name} "
                f"(gain {gain_percent(result.gain_step)}%)"
            )
        else:
            click.echo(f"  {payload.hex().upper()} -> not a tone ({result.reason.value})")

    click.echo(f"Decoded {tone_count}/{len(payloads)} tone frames, phase {decoder.state.phase}")

    if output:
        samples = np.concatenate(chunks)
        try:
            write_wav(output, samples)
        except Exception as e:
            click.echo(f"Error writing file: {e}", err=True)
            sys.exit(1)
        click.echo(f"✓ Wrote {len(samples)} samples to {output}")


if __name__ == "__main__":
    main()
