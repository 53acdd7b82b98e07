"""Environment configuration for the relay.

Usage
-----
Load settings at startup:

>>> import os
>>> os.environ["PRTHREAD_GITHUB_SECRET"] = "s3cret"
>>> config = RelayConfig.from_env()
>>> config.github_secret
's3cret'

"""

from __future__ import annotations

import dataclasses as dc
import os

from prthread.github.search import GitHubSearchConfig

_DEFAULT_GITHUB_API_URL = "https://api.github.com"
_DEFAULT_SEARCH_TIMEOUT_S = 10.0
_TRUTHY = frozenset({"1", "true", "yes", "on"})


class RelayConfigError(ValueError):
    """Raised when an environment setting cannot be parsed."""

    @classmethod
    def invalid_timeout(cls, raw: str) -> RelayConfigError:
        """Return an error for a non-positive or non-numeric timeout."""
        msg = f"PRTHREAD_SEARCH_TIMEOUT_S must be a positive number, got: {raw!r}"
        return cls(msg)


def _optional(env_var: str) -> str | None:
    raw = os.environ.get(env_var, "").strip()
    return raw or None


@dc.dataclass(frozen=True, slots=True)
class RelayConfig:
    """Settings shared by the webhook resource and its collaborators.

    Attributes
    ----------
    github_secret
        Webhook secret configured at GitHub. When unset every request is
        rejected as unauthorized.
    debug
        Log payloads of events that produce no notification.
    github_user, github_token
        Basic-auth credentials for the issue search API. Commit-only events
        are threaded by SHA when either is missing.
    github_api_url
        GitHub REST API base URL.
    search_timeout_s
        Upper bound for a single search request.
    database_url
        SQLAlchemy async URL for the thread registry; an in-memory registry
        is used when unset.

    """

    github_secret: str | None = None
    debug: bool = False
    github_user: str | None = None
    github_token: str | None = None
    github_api_url: str = _DEFAULT_GITHUB_API_URL
    search_timeout_s: float = _DEFAULT_SEARCH_TIMEOUT_S
    database_url: str | None = None

    @staticmethod
    def _parse_timeout() -> float:
        raw = os.environ.get("PRTHREAD_SEARCH_TIMEOUT_S", "")
        if not raw.strip():
            return _DEFAULT_SEARCH_TIMEOUT_S
        try:
            value = float(raw)
        except ValueError as exc:
            raise RelayConfigError.invalid_timeout(raw) from exc
        if value <= 0:
            raise RelayConfigError.invalid_timeout(raw)
        return value

    @classmethod
    def from_env(cls) -> RelayConfig:
        """Create configuration from ``PRTHREAD_*`` environment variables.

        Raises
        ------
        RelayConfigError
            If ``PRTHREAD_SEARCH_TIMEOUT_S`` is not a positive number.

        """
        debug = os.environ.get("PRTHREAD_DEBUG", "").strip().lower() in _TRUTHY
        return cls(
            github_secret=_optional("PRTHREAD_GITHUB_SECRET"),
            debug=debug,
            github_user=_optional("PRTHREAD_GITHUB_USER"),
            github_token=_optional("PRTHREAD_GITHUB_TOKEN"),
            github_api_url=_optional("PRTHREAD_GITHUB_API_URL")
            or _DEFAULT_GITHUB_API_URL,
            search_timeout_s=cls._parse_timeout(),
            database_url=_optional("PRTHREAD_DATABASE_URL"),
        )

    def search_config(self) -> GitHubSearchConfig | None:
        """Return search client settings, or ``None`` without credentials."""
        if self.github_user is None or self.github_token is None:
            return None
        return GitHubSearchConfig(
            username=self.github_user,
            token=self.github_token,
            api_url=self.github_api_url,
            timeout_s=self.search_timeout_s,
        )
