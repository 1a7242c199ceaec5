"""Recursive MIME part tree built from a body and its headers.

The body is parsed with ``email.message_from_bytes`` and the resulting
``EmailMessage`` is walked depth-first, one :class:`MessagePart` per
entity.  Leaf bodies are transfer-decoded (``get_payload(decode=True)``)
but never charset-decoded; ``body_encoding`` names the codec for that.
"""

from __future__ import annotations

import codecs
import email
import email.policy
from email.message import Message as _StdlibMessage
from os import PathLike
from pathlib import Path

import structlog

from .header import MessageHeader

logger = structlog.get_logger()

DEFAULT_CHARSET = "us-ascii"
NO_NAME = "(no name)"


class MessagePart:
    """A node in the MIME tree.

    Multipart nodes carry child parts in :attr:`message_parts` and have no
    body of their own.  Leaf nodes carry the decoded :attr:`body` bytes.

    ``is_html_body``, ``is_text_body`` and ``is_inline`` are classification
    flags; the message construction pipeline is the only writer of the
    first two.
    """

    def __init__(
        self,
        entity: _StdlibMessage,
        headers: MessageHeader,
        *,
        default_charset: str = DEFAULT_CHARSET,
    ) -> None:
        self.headers = headers
        self.content_type = headers.content_type
        self.content_id = headers.content_id
        self.content_disposition = headers.content_disposition
        self.content_description = headers.content_description
        self.content_transfer_encoding = headers.content_transfer_encoding
        self.body_encoding = _resolve_charset(self.content_type.charset, default_charset)
        self.file_name = _file_name(headers)

        disposition = self.content_disposition
        self.is_inline = disposition is not None and disposition.inline
        self.is_attachment = (not self.is_text and not self.is_multipart) or (
            disposition is not None and not disposition.inline
        )
        self.is_html_body = False
        self.is_text_body = False

        self.message_parts: list[MessagePart] = []
        self.body: bytes | None = None

        if self.is_multipart and entity.is_multipart():
            for child in entity.get_payload():
                self.message_parts.append(
                    MessagePart(
                        child,
                        MessageHeader.from_message(child),
                        default_charset=default_charset,
                    )
                )
        elif entity.is_multipart():
            # message/rfc822 and friends: keep the embedded message as the body
            self.body = b"".join(
                inner.as_bytes(policy=email.policy.compat32) for inner in entity.get_payload()
            )
        else:
            if self.is_multipart:
                logger.debug("multipart_without_boundary", media_type=self.media_type)
            self.body = entity.get_payload(decode=True) or b""

    @property
    def media_type(self) -> str:
        return self.content_type.media_type

    @property
    def is_multipart(self) -> bool:
        return self.media_type.startswith("multipart/")

    @property
    def is_text(self) -> bool:
        return self.media_type.startswith("text/")

    def get_body_as_text(self) -> str:
        """Decode the body with this part's declared character encoding."""
        if self.body is None:
            return ""
        return self.body.decode(self.body_encoding, errors="replace")

    def save(self, path: str | PathLike[str]) -> None:
        """Write the decoded body bytes to *path*, replacing any existing file."""
        if path is None:
            raise ValueError("path is required")
        Path(path).write_bytes(self.body or b"")

    def __repr__(self) -> str:
        return (
            f"MessagePart(media_type={self.media_type!r}, file_name={self.file_name!r}, "
            f"parts={len(self.message_parts)})"
        )


def build_part_tree(
    raw_body: bytes,
    headers: MessageHeader,
    *,
    default_charset: str = DEFAULT_CHARSET,
) -> MessagePart:
    """Parse *raw_body* under *headers* into a :class:`MessagePart` tree."""
    entity = email.message_from_bytes(headers.raw_block + raw_body, policy=email.policy.default)
    return MessagePart(entity, headers, default_charset=default_charset)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _file_name(headers: MessageHeader) -> str:
    disposition = headers.content_disposition
    if disposition is not None and disposition.file_name:
        return disposition.file_name
    return headers.content_type.name or NO_NAME


def _resolve_charset(charset: str | None, default_charset: str) -> str:
    """Map a declared charset to a Python codec name."""
    for candidate in (charset, default_charset):
        if not candidate:
            continue
        try:
            return codecs.lookup(candidate.strip().strip('"')).name
        except LookupError:
            logger.debug("unknown_charset", charset=candidate)
    return "ascii"
