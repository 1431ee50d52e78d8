"""CLI commands: ledger verify, ledger fetch."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
import httpx
from rich.panel import Panel
from rich.table import Table

from votechain.cli import cli, console
from votechain.client import VotechainAPIError, VotechainClient
from votechain.consensus.vote_ledger import IntegrityReport, VoteLedger


def _load_ledger(data) -> VoteLedger:
    try:
        return VoteLedger.from_export(data)
    except ValueError as e:
        console.print(f"[red]✗ Invalid chain export:[/] {e}")
        sys.exit(2)


def _print_report(report: IntegrityReport) -> None:
    if report.valid:
        console.print(
            Panel(
                f"[bold cyan]Entries:[/] {report.entries_checked}\n"
                f"[bold cyan]Merkle root:[/] {report.merkle_root}",
                title="[green]✅ Hash chain integrity: OK[/]",
                border_style="green",
            )
        )
        return

    console.print(
        f"[red]❌ Hash chain integrity: FAILED[/] "
        f"({len(report.violations)} violation(s) in {report.entries_checked} entries)"
    )
    table = Table(title="Violations")
    table.add_column("Entry", justify="right", style="bold")
    table.add_column("Type", style="red", no_wrap=True)
    table.add_column("Expected")
    table.add_column("Actual")
    for v in report.violations:
        table.add_row(str(v.index), v.type, str(v.expected), str(v.actual))
    console.print(table)


def _audit_and_exit(ledger: VoteLedger) -> None:
    report = ledger.audit()
    _print_report(report)
    if not report.valid:
        sys.exit(1)


@cli.group()
def ledger():
    """Audit exported vote ledgers."""
    pass


@ledger.command("verify")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def ledger_verify(path: Path):
    """Verify the integrity of an exported chain (JSON file)."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]✗ Not valid JSON:[/] {path} ({e})")
        sys.exit(2)

    with console.status("[bold blue]Verifying the ledger hash chain...[/]"):
        ledger_obj = _load_ledger(data)
    _audit_and_exit(ledger_obj)


@ledger.command("fetch")
@click.option("--url", default="http://localhost:3000", help="VOTECHAIN server URL")
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None,
    help="Save the downloaded export to this file",
)
def ledger_fetch(url: str, output: Path | None):
    """Download a server's chain and verify it locally."""
    try:
        with VotechainClient(url) as client:
            with console.status(f"[bold yellow]Downloading chain from {url}...[/]"):
                data = client.export_chain()
    except (httpx.HTTPError, VotechainAPIError) as e:
        console.print(f"[red]✗ Could not fetch the chain:[/] {e}")
        sys.exit(2)

    if output is not None:
        output.write_text(json.dumps(data, indent=2), encoding="utf-8")
        console.print(f"[green]✓[/] Export saved to [bold]{output}[/]")

    _audit_and_exit(_load_ledger(data))
