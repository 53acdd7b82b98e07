"""Chat notification value types."""

from __future__ import annotations

import typing as typ

import msgspec


class Notification(msgspec.Struct, kw_only=True, frozen=True, omit_defaults=True):
    """Rich chat notification rendered from a GitHub event.

    Field names follow Slack's attachment vocabulary; ``fallback_text`` and
    ``body_text`` encode as ``fallback`` and ``text``. Unset fields are
    omitted from the encoded attachment.

    Attributes
    ----------
    fallback_text : str
        Single-line summary for surfaces that cannot render attachments.
    title : str, optional
        Attachment title.
    title_link : str, optional
        URL the title links to.
    author_name : str, optional
        Display name of the acting GitHub user.
    author_link : str, optional
        Profile URL of the acting user.
    author_icon : str, optional
        Avatar URL of the acting user.
    body_text : str, optional
        Main attachment text.
    color : str, optional
        Attachment colour bar, hex or named.
    thread_ts : str, optional
        Origin message timestamp to reply to; not part of the attachment.

    """

    fallback_text: str = msgspec.field(name="fallback")
    title: str | None = None
    title_link: str | None = None
    author_name: str | None = None
    author_link: str | None = None
    author_icon: str | None = None
    body_text: str | None = msgspec.field(default=None, name="text")
    color: str | None = None
    thread_ts: str | None = None

    def in_thread(self, thread_ts: str) -> Notification:
        """Return a copy replying to the message at ``thread_ts``."""
        return msgspec.structs.replace(self, thread_ts=thread_ts)

    def to_attachment(self) -> dict[str, typ.Any]:
        """Encode the notification as a Slack message attachment."""
        attachment = msgspec.to_builtins(self)
        attachment.pop("thread_ts", None)
        return attachment


class DeliveryReceipt(msgspec.Struct, kw_only=True, frozen=True):
    """Acknowledgement of a posted chat message.

    Attributes
    ----------
    channel : str
        Channel the message landed in.
    timestamp : str
        Opaque message timestamp usable as a reply target.

    """

    channel: str
    timestamp: str
