#!/usr/bin/env python3
"""
Tiny Tones Encoder CLI - Build tone frames as hex.
"""

import logging
import sys

import click

from tinytones import (
    MAX_GAIN_STEP,
    MAX_INDEX,
    FrameClass,
    FrameEncodeError,
    ToneEncoder,
    decode,
    parse_tone,
    tone_name,
)


def dump_all(frame_class: FrameClass):
    """Encode and decode every index and gain step, one line each."""
    encoder = ToneEncoder(frame_class)

    click.echo(f"{frame_class.name} Frames:")
    # One past the table so the rejection shows up too
    for index in range(MAX_INDEX + 2):
        for gain_step in range(MAX_GAIN_STEP + 1):
            try:
                frame = encoder.encode(index, gain_step)
            except FrameEncodeError as e:
                click.echo(f"FAIL ({e.reason.value}); 0x{index:02X} gain {gain_step}")
                continue

            result = decode(frame_class, frame, 0)
            status = "OK" if result.ok else f"FAIL ({result.reason.value})"
            click.echo(f"OK; {frame.hex().upper()} --{status}; {tone_name(index)}")


@click.command()
@click.argument("tone", required=False)
@click.option(
    "-m", "--mode",
    type=click.Choice(["3200", "1600"]),
    default="3200",
    help="Codec2 mode of the carrying frames (default: 3200)",
)
@click.option(
    "-g", "--gain",
    type=int,
    default=MAX_GAIN_STEP,
    help="Gain step 0-15, each step 6.25% (default: 15)",
)
@click.option(
    "-d", "--duration",
    type=float,
    default=0.0,
    help="Tone length in ms; emits as many frames as needed (default: one frame)",
)
@click.option(
    "--all", "dump",
    is_flag=True,
    help="Encode and decode every tone index and gain step",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
def main(tone: str | None, mode: str, gain: int, duration: float, dump: bool, verbose: bool):
    """
    Encode a tone into Codec2 tone frames, printed as hex.

    TONE is a DTMF digit, a note name, knox:N or a raw index.

    Examples:

        tinytones-encode 5

        tinytones-encode A4 -m 1600 -g 7

        tinytones-encode knox:3 -d 500

        tinytones-encode --all
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    frame_class = FrameClass.from_name(mode)

    if dump:
        dump_all(frame_class)
        return

    if tone is None:
        click.echo("Error: missing TONE (or use --all)", err=True)
        sys.exit(2)

    try:
        index = parse_tone(tone)
    except ValueError as e:
        click.echo(f"Error parsing tone: {e}", err=True)
        sys.exit(1)

    encoder = ToneEncoder(frame_class)

    try:
        frames = encoder.burst(index, gain, duration)
    except FrameEncodeError as e:
        click.echo(f"Error encoding tone: {e}", err=True)
        sys.exit(1)

    if verbose:
        click.echo(f"{tone_name(index)} (0x{index:02X}), {len(frames)} x {frame_class.name} frames")

    for frame in frames:
        click.echo(frame.hex().upper())


if __name__ == "__main__":
    main()
