"""rate-limit command: current GitHub API quota."""

from __future__ import annotations

import click
from rich.console import Console

from pullbuddy_cli.commands.common import require_accessor, run
from pullbuddy_core.recommender import get_rate_limit_snapshot

console = Console()


@click.command("rate-limit")
@click.pass_context
def rate_limit_cmd(ctx):
    """Show the remaining GitHub REST API quota."""
    accessor = require_accessor(ctx)
    snapshot = run(get_rate_limit_snapshot(accessor))

    style = "green" if snapshot.remaining > snapshot.limit // 10 else "red"
    console.print(f"[{style}]{snapshot.remaining}[/{style}] / {snapshot.limit} requests remaining ({snapshot.used} used)")
    console.print(f"Resets at {snapshot.reset_at:%Y-%m-%d %H:%M:%S %Z}")
