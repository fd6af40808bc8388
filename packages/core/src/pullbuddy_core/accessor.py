"""Cached async access to GitHub data.

The accessor is the only place that talks to the GitHub client. Multi-record
fetches that the recommendation pipeline repeats for every candidate (the
repo's pull requests, each PR's reviews, each PR's files) are read through
the cache store; everything else goes straight to GitHub.

Blocking client calls run in worker threads via asyncio.to_thread, at most
``max_concurrency`` at a time. Cache reads and writes stay on the event loop
thread. Concurrent misses on the same key share a single in-flight fetch.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from pullbuddy_core.gh.pull_request import files_cache_key, pull_request_cache_key, reviews_cache_key

if TYPE_CHECKING:
    from pullbuddy_core.gh.client import GitHubClient
    from pullbuddy_store.base import BaseStore

logger = logging.getLogger(__name__)


class GitHubDataAccessor:
    def __init__(
        self,
        client: GitHubClient,
        store: BaseStore,
        max_concurrency: int = 8,
        pull_request_pages: int | None = 1,
    ):
        self.client = client
        self.store = store
        self._pull_request_pages = pull_request_pages
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._inflight: dict[str, asyncio.Future] = {}

    @classmethod
    def from_config(cls, client: GitHubClient, store: BaseStore, config: dict) -> GitHubDataAccessor:
        return cls(
            client,
            store,
            max_concurrency=config.get("max_concurrency", 8),
            pull_request_pages=config.get("pull_request_pages", 1),
        )

    # ------------------------------------------------------------------ #
    # Plumbing                                                             #
    # ------------------------------------------------------------------ #

    async def _call(self, fn: Callable[..., Any], *args, **kwargs) -> Any:
        async with self._semaphore:
            return await asyncio.to_thread(fn, *args, **kwargs)

    async def _read_through(self, key: str, load: Callable[[], Awaitable[Any]]) -> Any:
        cached = self.store.get(key)
        if cached is not None:
            return cached

        pending = self._inflight.get(key)
        if pending is not None:
            return await asyncio.shield(pending)

        future = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            value = await load()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            future.set_exception(e)
            # Mark retrieved so an un-awaited failure is not reported as "never retrieved".
            future.exception()
            raise
        else:
            self.store.set(key, value)
            future.set_result(value)
            return value
        finally:
            del self._inflight[key]

    # ------------------------------------------------------------------ #
    # Cached                                                               #
    # ------------------------------------------------------------------ #

    async def fetch_pull_requests(self, owner: str, repo: str) -> list[dict]:
        """All recent pull requests of a repository, most recently updated first."""
        return await self._read_through(
            pull_request_cache_key(owner, repo),
            lambda: self._call(
                self.client.list_pull_requests,
                owner,
                repo,
                state="all",
                sort="updated",
                direction="desc",
                max_pages=self._pull_request_pages,
            ),
        )

    async def fetch_reviews(self, owner: str, repo: str, pr_number: int) -> list[dict]:
        return await self._read_through(
            reviews_cache_key(owner, repo, pr_number),
            lambda: self._call(self.client.list_pull_request_reviews, owner, repo, pr_number),
        )

    async def fetch_files(self, owner: str, repo: str, pr_number: int) -> list[dict]:
        return await self._read_through(
            files_cache_key(owner, repo, pr_number),
            lambda: self._call(self.client.list_pull_request_files, owner, repo, pr_number),
        )

    # ------------------------------------------------------------------ #
    # Uncached                                                             #
    # ------------------------------------------------------------------ #

    async def fetch_org_pull_requests(self, owner: str) -> list[dict]:
        """Open pull requests (first page) of every repository in the organisation.

        Repositories are walked one after another and results concatenated
        in repository order; nothing is deduplicated or capped.
        """
        repos = await self._call(self.client.list_org_repos, owner)
        pull_requests: list[dict] = []
        for repo in repos:
            prs = await self._call(self.client.list_pull_requests, owner, repo["name"], max_pages=1)
            pull_requests.extend(prs)
        logger.debug("Collected %d pull request(s) across %d repositories of %s", len(pull_requests), len(repos), owner)
        return pull_requests

    async def fetch_pull_request(self, owner: str, repo: str, pr_number: int) -> dict:
        return await self._call(self.client.get_pull_request, owner, repo, pr_number)

    async def fetch_review_comments(self, owner: str, repo: str, pr_number: int, review_id: int) -> list[dict]:
        return await self._call(self.client.list_review_comments, owner, repo, pr_number, review_id)

    async def fetch_org_members(self, owner: str) -> list[dict]:
        return await self._call(self.client.list_org_members, owner)

    async def fetch_user(self, login: str) -> dict:
        return await self._call(self.client.get_user, login)

    async def fetch_rate_limit(self) -> dict:
        """Never cached: quota numbers must reflect the moment of the call."""
        return await self._call(self.client.get_rate_limit)
