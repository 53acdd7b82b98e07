"""GitHub integration errors."""

from __future__ import annotations


class GitHubAPIError(RuntimeError):
    """Raised when the GitHub REST API cannot be queried successfully."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int) -> GitHubAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(f"GitHub search HTTP {status_code}", status_code=status_code)

    @classmethod
    def timeout(cls) -> GitHubAPIError:
        """Return an error for a search request that exceeded its timeout."""
        return cls("GitHub search request timed out")

    @classmethod
    def network_error(cls, detail: str) -> GitHubAPIError:
        """Return an error for DNS, connection or TLS failures."""
        return cls(f"GitHub search network error: {detail}")


class GitHubResponseShapeError(RuntimeError):
    """Raised when GitHub responses are missing expected fields."""

    @classmethod
    def missing(cls, field: str) -> GitHubResponseShapeError:
        """Return an error for a missing response field."""
        return cls(f"GitHub search response missing expected field: {field}")


class GitHubConfigError(RuntimeError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def empty_credentials(cls) -> GitHubConfigError:
        """Return an error when the basic-auth credentials are empty."""
        return cls("GitHub search credentials must be non-empty")
