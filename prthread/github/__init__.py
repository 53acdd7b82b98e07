"""GitHub webhook verification, classification and thread resolution."""

from __future__ import annotations

from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .formatting import classify
from .models import EventType, InboundEvent, IssueSearchResult, WebhookDelivery
from .search import GitHubSearchClient, GitHubSearchConfig, IssueSearchClient
from .signature import compute_signature, verify_signature
from .threads import ThreadKeyResolver

__all__ = [
    "EventType",
    "GitHubAPIError",
    "GitHubConfigError",
    "GitHubResponseShapeError",
    "GitHubSearchClient",
    "GitHubSearchConfig",
    "InboundEvent",
    "IssueSearchClient",
    "IssueSearchResult",
    "ThreadKeyResolver",
    "WebhookDelivery",
    "classify",
    "compute_signature",
    "verify_signature",
]
