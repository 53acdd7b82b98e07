"""GitHub issue search client used to map commits back to pull requests."""

from __future__ import annotations

import dataclasses
import typing as typ

import httpx
import msgspec

from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import IssueSearchPage, IssueSearchResult

_HTTP_ERROR_STATUS_THRESHOLD = 400
_DEFAULT_API_URL = "https://api.github.com"
_DEFAULT_TIMEOUT_S = 10.0


class IssueSearchClient(typ.Protocol):
    """Interface for finding issues and pull requests that mention a commit."""

    async def search_commit(self, sha: str) -> list[IssueSearchResult]:
        """Return issues and pull requests referencing ``sha``."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubSearchConfig:
    """Configuration for the GitHub issue search client."""

    username: str
    token: str
    api_url: str = _DEFAULT_API_URL
    timeout_s: float = _DEFAULT_TIMEOUT_S
    user_agent: str = "prthread/0.1"


class GitHubSearchClient:
    """Basic-auth implementation of :class:`IssueSearchClient`."""

    def __init__(
        self,
        config: GitHubSearchConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        if not config.username.strip() or not config.token.strip():
            raise GitHubConfigError.empty_credentials()

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.timeout_s,
            auth=httpx.BasicAuth(config.username, config.token),
            headers={
                "User-Agent": config.user_agent,
                "Accept": "application/vnd.github+json",
            },
        )

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def search_commit(self, sha: str) -> list[IssueSearchResult]:
        """Return issues and pull requests whose search index mentions ``sha``.

        Raises
        ------
        GitHubAPIError
            If the request times out, fails in transport or returns non-2xx.
        GitHubResponseShapeError
            If the response body is not a search result page.

        """
        url = f"{self._config.api_url.rstrip('/')}/search/issues"
        try:
            response = await self._client.get(url, params={"q": sha})
        except httpx.TimeoutException as exc:
            raise GitHubAPIError.timeout() from exc
        except httpx.RequestError as exc:
            raise GitHubAPIError.network_error(str(exc)) from exc

        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(response.status_code)

        try:
            page = msgspec.json.decode(response.content, type=IssueSearchPage)
        except msgspec.DecodeError as exc:
            raise GitHubResponseShapeError.missing("items") from exc
        return page.items


__all__ = ["GitHubSearchClient", "GitHubSearchConfig", "IssueSearchClient"]
