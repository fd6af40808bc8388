"""MCP server exposing pullbuddy to AI agents.

Agents connect over stdio (``pullbuddy serve``) and get:

  Resources
    pull-requests://list/{owner}                       open PRs across the org
    pr-details://list/{owner}/{repo}/{pr_number}        one PR with files and reviewers
    review-states://summary/{owner}                     pending review requests per user
    review-buddy://list/{owner}                         members with display names
    review-history://list/{owner}/{repo}/{reviewer}     30-day review history
  Tools
    find-pr-buddy(pr_url, count)                        ranked reviewer recommendation
    check-github-rate-limit()                           current API quota
  Prompts
    estimate-review-time / analyze-pr-quality / improve-pr-description

The handlers below are plain coroutines taking the accessor explicitly;
build_server() binds them to one accessor so every request shares a cache.
Nothing here may write to stdout: stdout is the MCP transport.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ResourceError, ToolError
from mcp.server.fastmcp.prompts.base import AssistantMessage, Message, UserMessage
from mcp.types import TextContent

from pullbuddy_core.exceptions import InvalidReferenceError, UpstreamNotFoundError
from pullbuddy_core.gh.pull_request import parse_pull_request_reference, require_pull_request_reference
from pullbuddy_core.history import get_review_history
from pullbuddy_core.models import PullRequestDetails, PullRequestReference
from pullbuddy_core.recommender import (
    get_candidate_reviewers,
    get_pull_request_details,
    get_pull_requests_for_owner,
    get_rate_limit_snapshot,
    get_review_request_load,
    recommend_reviewers,
)
from pullbuddy_core.utils.serialize import to_json

if TYPE_CHECKING:
    from pullbuddy_core.accessor import GitHubDataAccessor

logger = logging.getLogger(__name__)

SERVER_NAME = "pullbuddy"

INVALID_URL_MESSAGE = "Invalid pull request URL. Expected a GitHub PR link such as https://github.com/owner/repo/pull/123."
MISSING_URL_MESSAGE = "Please provide a pull request URL."

_QUALITY_CHECKLIST = """Rate each of the following out of 100 and give a grade (A-F):
1. Quality of the PR description
2. Appropriateness of the PR size
3. Reviewer assignment
4. Overall quality"""

_DESCRIPTION_SECTIONS = """Write a well-structured PR description with these sections:
1. Summary of changes
2. Related issues
3. How to test
4. Screenshots / demo (if relevant)
5. Additional considerations (performance impact, security, DB migrations, etc.)"""


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


async def find_pr_buddy(
    accessor: GitHubDataAccessor,
    pr_url: str,
    count: int = 10,
    history_days: int = 30,
    exclude_target: bool = False,
) -> list[str]:
    """Return the text blocks of a recommendation, or raise ToolError."""
    try:
        ref = require_pull_request_reference(pr_url)
    except InvalidReferenceError:
        raise ToolError(INVALID_URL_MESSAGE)

    try:
        result = await recommend_reviewers(
            accessor, ref, count=count, history_days=history_days, exclude_target=exclude_target
        )
    except UpstreamNotFoundError:
        raise ToolError(f"Failed to fetch pull request details for {ref}.")

    return [
        f"Based on review history and file overlap from the last {history_days} days.",
        f"Recommending the top {count} of {result.considered} reviewer(s).",
        to_json([c.to_dict() for c in result.candidates], indent=2),
    ]


async def check_rate_limit(accessor: GitHubDataAccessor) -> str:
    snapshot = await get_rate_limit_snapshot(accessor)
    return to_json(snapshot.to_dict(), indent=2)


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


def _describe(details: PullRequestDetails, include_reviewers: bool = True) -> str:
    pr = details.pr
    lines = [
        f"PR title: {pr.get('title')}",
        f"Changed files: {pr.get('changed_files') or 0}",
        f"Lines added: {pr.get('additions') or 0}",
        f"Lines deleted: {pr.get('deletions') or 0}",
    ]
    if include_reviewers:
        lines.append(f"Requested reviewers: {len(details.reviewers)}")
    return "\n".join(lines)


def estimate_review_time_text(details: PullRequestDetails) -> str:
    return (
        "Estimate how long it will take to review the following pull request:\n"
        f"{_describe(details)}\n"
        f"PR description: {details.pr.get('body') or 'No description'}"
    )


def analyze_quality_text(details: PullRequestDetails) -> str:
    return (
        "Analyze the quality of the following pull request and suggest improvements:\n"
        f"{_describe(details)}\n"
        f"PR description: {details.pr.get('body') or 'No description'}\n\n"
        f"{_QUALITY_CHECKLIST}"
    )


def improve_description_text(details: PullRequestDetails) -> str:
    return (
        "Improve the following pull request description:\n"
        f"Current description:\n{details.pr.get('body') or ''}\n\n"
        f"{_describe(details, include_reviewers=False)}\n\n"
        f"{_DESCRIPTION_SECTIONS}"
    )


async def render_pr_prompt(accessor: GitHubDataAccessor, pr_url: str, render) -> list[Message]:
    """Fetch the PR behind ``pr_url`` and render it with ``render``.

    Failures become a single assistant message rather than an exception so the
    agent can relay them to the user.
    """
    if not pr_url:
        return [AssistantMessage(MISSING_URL_MESSAGE)]

    ref = parse_pull_request_reference(pr_url)
    if ref is None:
        return [AssistantMessage(INVALID_URL_MESSAGE)]

    details = await get_pull_request_details(accessor, ref)
    if details is None:
        return [AssistantMessage("Failed to fetch pull request details.")]

    return [UserMessage(render(details))]


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


async def pull_request_details_json(accessor: GitHubDataAccessor, owner: str, repo: str, pr_number: str) -> str:
    if not pr_number.isdecimal():
        raise ResourceError(f"Invalid pull request number {pr_number!r}: expected a number such as 42.")
    ref = PullRequestReference(owner=owner, repo=repo, pr_number=int(pr_number))
    details = await get_pull_request_details(accessor, ref)
    return to_json(details.to_dict() if details else None)


async def review_history_json(
    accessor: GitHubDataAccessor, owner: str, repo: str, reviewer: str, history_days: int = 30
) -> str:
    since = datetime.now(timezone.utc) - timedelta(days=history_days)
    history = await get_review_history(accessor, owner, repo, reviewer, since=since)
    return to_json(history.to_dict())


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


def build_server(accessor: GitHubDataAccessor, config: dict) -> FastMCP:
    """Register every resource, tool and prompt against one shared accessor."""
    mcp = FastMCP(SERVER_NAME)
    history_days = config.get("history_days", 30)
    default_count = config.get("recommend_count", 10)
    exclude_target = config.get("exclude_target_pr", False)

    @mcp.resource("pull-requests://list/{owner}", name="pull-requests", mime_type="application/json")
    async def pull_requests_resource(owner: str) -> str:
        """Open pull requests across every repository of an organisation."""
        return to_json(await get_pull_requests_for_owner(accessor, owner))

    @mcp.resource("pr-details://list/{owner}/{repo}/{pr_number}", name="pr-details", mime_type="application/json")
    async def pr_details_resource(owner: str, repo: str, pr_number: str) -> str:
        """A pull request with its changed files and requested reviewers."""
        return await pull_request_details_json(accessor, owner, repo, pr_number)

    @mcp.resource("review-states://summary/{owner}", name="review-states", mime_type="application/json")
    async def review_states_resource(owner: str) -> str:
        """Pending review requests per user."""
        return to_json(await get_review_request_load(accessor, owner))

    @mcp.resource("review-buddy://list/{owner}", name="review-buddy", mime_type="application/json")
    async def review_buddy_resource(owner: str) -> str:
        """Organisation members who could review, with display names."""
        return to_json(await get_candidate_reviewers(accessor, owner))

    @mcp.resource(
        "review-history://list/{owner}/{repo}/{reviewer}", name="review-history", mime_type="application/json"
    )
    async def review_history_resource(owner: str, repo: str, reviewer: str) -> str:
        """A reviewer's reviews and comments in a repository."""
        return await review_history_json(accessor, owner, repo, reviewer, history_days)

    @mcp.tool(name="find-pr-buddy")
    async def find_pr_buddy_tool(pr_url: str, count: int = default_count):
        """Recommend reviewers for a GitHub pull request URL.

        Scores organisation members by pending review load, experience with the
        files the PR touches, and recent review volume.

        The URL argument is ``pr_url``; clients sending a camelCase ``prUrl``
        fail argument validation and must rename it.
        """
        blocks = await find_pr_buddy(accessor, pr_url, count, history_days, exclude_target)
        return [TextContent(type="text", text=block) for block in blocks]

    @mcp.tool(name="check-github-rate-limit")
    async def rate_limit_tool():
        """Show the remaining GitHub API quota."""
        return [TextContent(type="text", text=await check_rate_limit(accessor))]

    @mcp.prompt(name="estimate-review-time", description="Estimate how long a PR will take to review")
    async def estimate_review_time(pr_url: str) -> list[Message]:
        return await render_pr_prompt(accessor, pr_url, estimate_review_time_text)

    @mcp.prompt(name="analyze-pr-quality", description="Assess a PR's quality and suggest improvements")
    async def analyze_pr_quality(pr_url: str) -> list[Message]:
        return await render_pr_prompt(accessor, pr_url, analyze_quality_text)

    @mcp.prompt(name="improve-pr-description", description="Rewrite a PR description into a structured one")
    async def improve_pr_description(pr_url: str) -> list[Message]:
        return await render_pr_prompt(accessor, pr_url, improve_description_text)

    logger.debug("MCP server %s configured", SERVER_NAME)
    return mcp
