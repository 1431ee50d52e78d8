"""
VOTECHAIN CLI: Package init.

Re-exports the main CLI group and shared utilities.
"""

from __future__ import annotations

import click
from rich.console import Console

from votechain import __version__

console = Console()


# ─── Main Group ──────────────────────────────────────────────────

@click.group()
@click.version_option(__version__, prog_name="votechain")
def cli() -> None:
    """VOTECHAIN: tamper-evident vote ledger."""
    pass


# ─── Register all sub-modules ───────────────────────────────────
from votechain.cli import core  # noqa: E402, F401
from votechain.cli import ledger_cmds  # noqa: E402, F401

# ─── Registration ────────────────────────────────────────────────
from votechain.cli.ledger_cmds import ledger  # noqa: E402

cli.add_command(ledger)


if __name__ == "__main__":
    cli()
