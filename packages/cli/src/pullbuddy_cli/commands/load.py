"""load command: pending review requests per user."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from pullbuddy_cli.commands.common import require_accessor, run
from pullbuddy_core.recommender import get_review_request_load

console = Console()


@click.command("load")
@click.option("--owner", required=True, help="GitHub organisation.")
@click.pass_context
def load_cmd(ctx, owner: str):
    """Show how many open review requests each user has in OWNER's repositories."""
    accessor = require_accessor(ctx)
    load = run(get_review_request_load(accessor, owner))

    if not load:
        console.print("[yellow]No pending review requests.[/yellow]")
        return

    table = Table(title=f"Pending review requests in {owner}", show_header=True, header_style="bold cyan")
    table.add_column("Reviewer", style="bold")
    table.add_column("Pending", justify="right")
    for login, pending in sorted(load.items(), key=lambda item: (-item[1], item[0])):
        table.add_row(login, str(pending))
    console.print(table)
