"""candidates command: organisation members eligible to review."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from pullbuddy_cli.commands.common import require_accessor, run
from pullbuddy_core.recommender import get_candidate_reviewers

console = Console()


@click.command("candidates")
@click.option("--owner", required=True, help="GitHub organisation.")
@click.pass_context
def candidates_cmd(ctx, owner: str):
    """List OWNER's members with their display names."""
    accessor = require_accessor(ctx)
    members = run(get_candidate_reviewers(accessor, owner))

    if not members:
        console.print("[yellow]No members visible with this token.[/yellow]")
        return

    table = Table(title=f"Members of {owner}", show_header=True, header_style="bold cyan")
    table.add_column("Login", style="bold")
    table.add_column("Name")
    for m in members:
        table.add_row(m["login"], m.get("name") or "[dim]-[/dim]")
    console.print(table)
