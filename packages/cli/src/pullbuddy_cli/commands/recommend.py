"""recommend command: rank reviewers for a pull request."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from pullbuddy_cli.commands.common import require_accessor, run
from pullbuddy_core.exceptions import InvalidReferenceError
from pullbuddy_core.gh.pull_request import require_pull_request_reference
from pullbuddy_core.recommender import recommend_reviewers
from pullbuddy_core.utils.serialize import to_json

console = Console()


@click.command("recommend")
@click.argument("pr_url")
@click.option("--count", "-n", type=int, default=None, help="Number of reviewers to show. Defaults to recommend_count.")
@click.option("--json", "as_json", is_flag=True, help="Print the ranking as JSON instead of a table.")
@click.pass_context
def recommend_cmd(ctx, pr_url: str, count: int | None, as_json: bool):
    """Recommend reviewers for PR_URL.

    Scores every organisation member by pending review load, experience
    with the files this PR touches, and review volume over the last
    `history_days` days.

    \b
    Example:
      pullbuddy recommend https://github.com/acme/widgets/pull/42 -n 3
    """
    config = ctx.obj["config"]
    try:
        ref = require_pull_request_reference(pr_url)
    except InvalidReferenceError as e:
        raise click.BadParameter(str(e), param_hint="PR_URL")

    accessor = require_accessor(ctx)
    if count is None:
        count = config.get("recommend_count", 10)

    result = run(
        recommend_reviewers(
            accessor,
            ref,
            count=count,
            history_days=config.get("history_days", 30),
            exclude_target=config.get("exclude_target_pr", False),
        )
    )

    if as_json:
        click.echo(to_json([c.to_dict() for c in result.candidates], indent=2))
        return

    if not result.candidates:
        console.print("[yellow]No eligible reviewers found.[/yellow]")
        return

    table = Table(
        title=f"Top {len(result.candidates)} of {result.considered} reviewer(s) for {ref}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("#", justify="right", width=3)
    table.add_column("Login", style="bold")
    table.add_column("Name")
    table.add_column("Score", justify="right")
    table.add_column("Pending", justify="right")
    table.add_column("Related", justify="right")
    table.add_column("Reviews", justify="right")

    for rank, c in enumerate(result.candidates, 1):
        table.add_row(
            str(rank),
            c.login,
            c.name or "",
            f"{c.score:.2f}",
            str(c.pending_reviews),
            str(c.stats.related_file_changes),
            str(c.stats.total_reviews),
        )

    console.print(table)
    console.print(f"[dim]Based on review history from the last {config.get('history_days', 30)} days.[/dim]")
