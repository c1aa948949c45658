"""Command-line tools for Tiny Tones."""
