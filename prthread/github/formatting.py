"""Classify GitHub webhook payloads into chat notifications.

Examples
--------
>>> notification = classify(
...     EventType.PULL_REQUEST,
...     {
...         "action": "opened",
...         "pull_request": {
...             "number": 7,
...             "title": "Add retries",
...             "html_url": "https://github.com/octo/reef/pull/7",
...             "user": {"login": "octo"},
...         },
...     },
... )
>>> notification.title
'PR #7: Add retries'
>>> classify(EventType.UNKNOWN, {}) is None
True

"""

from __future__ import annotations

import typing as typ

from prthread.delivery.models import Notification
from prthread.logging import get_logger, log_info

from .models import PULL_REQUEST_EVENTS, EventType

logger = get_logger(__name__)

LIFECYCLE_COLOR = "#d011dd"
OPENED_COLOR = "#7CD197"
STATUS_COLORS: typ.Final[dict[str, str]] = {
    "pending": "#ffffcc",
    "error": "#ff8080",
    "success": "#b3ffcc",
    "failure": "#ff9900",
}
_LIFECYCLE_ACTIONS = frozenset({"closed", "reopened"})
_SHORT_SHA_LENGTH = 7

Payload: typ.TypeAlias = dict[str, typ.Any]


def _mapping(node: object, field: str) -> Payload:
    """Return ``node[field]`` when it is a mapping, else an empty dict."""
    if not isinstance(node, dict):
        return {}
    value = node.get(field)
    return value if isinstance(value, dict) else {}


def _text(node: Payload, field: str) -> str | None:
    value = node.get(field)
    return value if isinstance(value, str) else None


def _author_fields(user: Payload) -> dict[str, str | None]:
    return {
        "author_name": _text(user, "login"),
        "author_link": _text(user, "html_url"),
        "author_icon": _text(user, "avatar_url"),
    }


def _pull_request_lifecycle(payload: Payload) -> Notification:
    pull_request = _mapping(payload, "pull_request")
    number = pull_request.get("number")
    action = str(payload.get("action"))
    if action == "closed" and pull_request.get("merged"):
        action = "merged"

    return Notification(
        fallback_text=f"PR #{number}: {action}",
        title=action.upper(),
        title_link=_text(pull_request, "html_url"),
        color=LIFECYCLE_COLOR,
        **_author_fields(_mapping(payload, "sender")),
    )


def _pull_request_update(payload: Payload) -> Notification:
    pull_request = _mapping(payload, "pull_request")
    number = pull_request.get("number")
    title = _text(pull_request, "title") or ""
    url = _text(pull_request, "html_url")

    return Notification(
        fallback_text=f"PR #{number}: {title} - {url}",
        title=f"PR #{number}: {title}",
        title_link=url,
        body_text=_text(pull_request, "body"),
        color=OPENED_COLOR,
        **_author_fields(_mapping(pull_request, "user")),
    )


def _issue_comment(payload: Payload) -> Notification:
    issue = _mapping(payload, "issue")
    comment = _mapping(payload, "comment")
    user = _mapping(comment, "user")
    body = _text(comment, "body")

    return Notification(
        fallback_text=f"PR #{issue.get('number')}: {_text(user, 'login')}: {body}",
        title_link=_text(comment, "html_url"),
        body_text=body,
        **_author_fields(user),
    )


def _commit_author(payload: Payload) -> dict[str, str | None]:
    """Return author fields for a status event's commit.

    Prefers the GitHub account of the commit author, then the committer, and
    finally the raw git author name when neither maps to an account.
    """
    commit = _mapping(payload, "commit")
    for role in ("author", "committer"):
        user = _mapping(commit, role)
        if user:
            return _author_fields(user)
    git_author = _mapping(_mapping(commit, "commit"), "author")
    return {
        "author_name": _text(git_author, "name"),
        "author_link": None,
        "author_icon": None,
    }


def _status(payload: Payload) -> Notification:
    state = _text(payload, "state") or ""
    description = _text(payload, "description") or ""
    commit = _mapping(payload, "commit")
    sha = _text(payload, "sha") or _text(commit, "sha") or ""
    link = _text(payload, "target_url") or _text(commit, "html_url") or ""

    return Notification(
        fallback_text=f"Commit {sha[:_SHORT_SHA_LENGTH]}: {state} - {description}",
        title=description,
        body_text=f"{link} ({state})",
        color=STATUS_COLORS.get(state),
        **_commit_author(payload),
    )


def classify(
    event_type: EventType,
    payload: Payload,
    *,
    debug: bool = False,
) -> Notification | None:
    """Return the notification for a webhook event, or ``None`` to skip it.

    Parameters
    ----------
    event_type
        Event type from the ``X-GitHub-Event`` header.
    payload
        Decoded webhook body.
    debug
        Log the event type and payload of skipped events.

    Returns
    -------
    Notification | None
        Rendered notification, or ``None`` when the event is not relayed.

    """
    if event_type in PULL_REQUEST_EVENTS and _mapping(payload, "pull_request"):
        if payload.get("action") in _LIFECYCLE_ACTIONS:
            return _pull_request_lifecycle(payload)
        return _pull_request_update(payload)

    if event_type is EventType.ISSUE_COMMENT and _mapping(payload, "comment"):
        return _issue_comment(payload)

    if event_type is EventType.STATUS:
        return _status(payload)

    if debug:
        log_info(logger, "Skipping %s event: %r", event_type, payload)
    return None


__all__ = ["LIFECYCLE_COLOR", "OPENED_COLOR", "STATUS_COLORS", "classify"]
