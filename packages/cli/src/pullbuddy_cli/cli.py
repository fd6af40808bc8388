"""CLI entry point for pullbuddy.

Commands:
  recommend: rank reviewers for a pull request URL
  load: pending review requests per user across an organisation
  candidates: organisation members with display names
  rate-limit: current GitHub API quota
  serve: run the MCP server on stdio
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from pullbuddy_cli.commands.candidates import candidates_cmd
from pullbuddy_cli.commands.load import load_cmd
from pullbuddy_cli.commands.rate_limit import rate_limit_cmd
from pullbuddy_cli.commands.recommend import recommend_cmd
from pullbuddy_cli.commands.serve import serve_cmd
from pullbuddy_core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _build_store(config: dict):
    """Instantiate the cache store from config.

      cache_ttl > 0 → TTLStore(ttl=cache_ttl)
      cache_ttl = 0 → NoOpStore (every fetch goes to GitHub)
    """
    from pullbuddy_store.memory import TTLStore
    from pullbuddy_store.noop import NoOpStore

    ttl = float(config.get("cache_ttl") or 0)
    if ttl <= 0:
        return NoOpStore()
    return TTLStore(ttl=ttl)


def _build_accessor(config: dict, store):
    """Wire the GitHub client and the store into an accessor.

    Raises ConfigurationError when no token is configured.
    """
    from pullbuddy_core.accessor import GitHubDataAccessor
    from pullbuddy_core.gh.client import GitHubClient

    client = GitHubClient.from_config(config)
    return GitHubDataAccessor.from_config(client, store, config)


@click.group()
@click.version_option(
    version=importlib.metadata.version("pullbuddy"),
    prog_name="pullbuddy",
)
@click.option(
    "--config",
    "config_path",
    default=".pullbuddy.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PULLBUDDY_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Find the best reviewer for a GitHub pull request."""
    from pullbuddy_core.config import load_config
    from pullbuddy_cli.auth import resolve_github_token

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        raise click.UsageError(str(e))

    # Resolve token early so all subcommands share the same resolution.
    token = resolve_github_token()
    if token:
        config["github_token"] = token

    store = _build_store(config)
    ctx.obj["config"] = config
    ctx.obj["store"] = store
    try:
        ctx.obj["accessor"] = _build_accessor(config, store)
    except ConfigurationError as e:
        # Deferred: --help and --version must work without a token.
        ctx.obj["accessor"] = None
        ctx.obj["config_error"] = str(e)


main.add_command(recommend_cmd)
main.add_command(load_cmd)
main.add_command(candidates_cmd)
main.add_command(rate_limit_cmd)
main.add_command(serve_cmd)
