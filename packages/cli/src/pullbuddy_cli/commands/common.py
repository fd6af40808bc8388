"""Helpers shared by every command that talks to GitHub."""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

import click

from pullbuddy_core.exceptions import UpstreamError

T = TypeVar("T")


def require_accessor(ctx: click.Context):
    """Return the accessor built by the group, or fail with the configuration error."""
    accessor = ctx.obj.get("accessor") if ctx.obj else None
    if accessor is None:
        message = (ctx.obj or {}).get("config_error") or "No GitHub token found. Set GITHUB_TOKEN."
        raise click.UsageError(message)
    return accessor


def run(coro: Awaitable[T]) -> T:
    """Run a coroutine to completion, reporting GitHub failures as CLI errors."""
    try:
        return asyncio.run(coro)
    except UpstreamError as e:
        raise click.ClickException(str(e))
