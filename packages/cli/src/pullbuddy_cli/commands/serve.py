"""serve command: run the MCP server on stdio."""

from __future__ import annotations

import click

from pullbuddy_cli.commands.common import require_accessor


@click.command("serve")
@click.pass_context
def serve_cmd(ctx):
    """Serve pullbuddy's tools, resources and prompts over MCP (stdio).

    \b
    Example MCP client config:
      {"mcpServers": {"pullbuddy": {"command": "pullbuddy", "args": ["serve"],
                                    "env": {"GITHUB_TOKEN": "..."}}}}
    """
    from pullbuddy_cli.server import build_server

    accessor = require_accessor(ctx)
    server = build_server(accessor, ctx.obj["config"])
    server.run()
