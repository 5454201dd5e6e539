"""unitwatch command-line interface.

Exposes:
    cli -- Click command entry point (registered as ``unitwatch`` script).
"""

from unitwatch.cli.main import cli

__all__ = ["cli"]
