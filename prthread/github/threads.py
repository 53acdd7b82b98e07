"""Thread key resolution for webhook payloads.

Every notification about the same pull request must land in the same chat
thread, so each payload is reduced to a deterministic key:

1. ``github-<pull_request.html_url>`` when the payload carries a pull request.
2. ``github-<issue.html_url>`` when it carries an issue (issue comments on a
   pull request use the pull request URL here).
3. For commit-only payloads such as status events, the pull request is looked
   up through issue search; the highest-numbered hit wins and its URL is
   used. With no hits, or when the lookup fails, the key falls back to
   ``github-<sha>``.
4. Otherwise there is no key and the notification is posted unthreaded.
"""

from __future__ import annotations

import typing as typ

from prthread.logging import get_logger, log_debug, log_warning

from .errors import GitHubAPIError, GitHubResponseShapeError

if typ.TYPE_CHECKING:
    from .models import IssueSearchResult
    from .search import IssueSearchClient

logger = get_logger(__name__)

THREAD_KEY_PREFIX = "github-"


def _html_url(payload: dict[str, typ.Any], field: str) -> str | None:
    node = payload.get(field)
    if not isinstance(node, dict):
        return None
    url = node.get("html_url")
    return url if isinstance(url, str) and url else None


def commit_sha(payload: dict[str, typ.Any]) -> str | None:
    """Return the commit SHA a payload refers to, if any."""
    sha = payload.get("sha")
    if isinstance(sha, str) and sha:
        return sha
    commit = payload.get("commit")
    if isinstance(commit, dict):
        nested = commit.get("sha")
        if isinstance(nested, str) and nested:
            return nested
    return None


def most_recent(results: typ.Sequence[IssueSearchResult]) -> IssueSearchResult:
    """Return the result with the highest issue number."""
    return max(results, key=lambda result: result.number)


class ThreadKeyResolver:
    """Resolve webhook payloads to stable thread keys.

    Parameters
    ----------
    search_client
        Optional issue search client. Without one, commit-only payloads
        always use the SHA fallback key.

    """

    def __init__(self, search_client: IssueSearchClient | None = None) -> None:
        """Store the search client used for commit lookups."""
        self._search_client = search_client

    async def resolve(self, payload: dict[str, typ.Any]) -> str | None:
        """Return the thread key for ``payload`` or ``None`` if it has none."""
        for field in ("pull_request", "issue"):
            url = _html_url(payload, field)
            if url is not None:
                return f"{THREAD_KEY_PREFIX}{url}"

        sha = commit_sha(payload)
        if sha is None:
            return None
        return await self._resolve_commit(sha)

    async def _resolve_commit(self, sha: str) -> str:
        if self._search_client is None:
            log_debug(logger, "No search client configured; threading %s by SHA", sha)
            return f"{THREAD_KEY_PREFIX}{sha}"

        try:
            results = await self._search_client.search_commit(sha)
        except (GitHubAPIError, GitHubResponseShapeError) as exc:
            log_warning(
                logger,
                "Pull request lookup for commit %s failed, threading by SHA: %s",
                sha,
                exc,
            )
            return f"{THREAD_KEY_PREFIX}{sha}"

        if not results:
            return f"{THREAD_KEY_PREFIX}{sha}"
        return f"{THREAD_KEY_PREFIX}{most_recent(results).html_url}"


__all__ = ["THREAD_KEY_PREFIX", "ThreadKeyResolver", "commit_sha", "most_recent"]
