"""Entry point for `python -m unitwatch`.

Usage:
    python -m unitwatch [SLACK_WEBHOOK_URL] [OPTIONS]
"""

from __future__ import annotations

from unitwatch.cli import cli

cli(prog_name="unitwatch")
