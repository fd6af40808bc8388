"""GitHub token lookup for the CLI and the MCP server.

`pullbuddy serve` is usually launched by an MCP client (an editor or agent
host) whose environment rarely carries GITHUB_TOKEN. Falling back to the
GitHub CLI session lets such a server start with the developer's existing
`gh auth login` and no token in the client's config.

Lookup order:
  1. GITHUB_TOKEN (environment or .env)
  2. `gh auth token`
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)

GH_TOKEN_TIMEOUT_SECONDS = 5


def _gh_cli_token() -> str | None:
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=GH_TOKEN_TIMEOUT_SECONDS,
        )
    except FileNotFoundError:
        logger.debug("gh CLI not installed; no session token available.")
        return None
    except subprocess.TimeoutExpired:
        logger.debug("gh auth token did not answer within %ds.", GH_TOKEN_TIMEOUT_SECONDS)
        return None

    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def resolve_github_token() -> str | None:
    """Return a GitHub token, or None when neither source has one.

    Never raises; the group turns a missing token into a usage error once a
    command actually needs GitHub.
    """
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    token = _gh_cli_token()
    if token:
        logger.debug("Using the gh CLI session token.")
    return token
