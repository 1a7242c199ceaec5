"""Root of the parsed email: headers, part tree and body/attachment classification.

A :class:`Message` is built once from raw bytes and is read-only afterwards.
Construction runs the whole pipeline synchronously:

1. split headers from body (always);
2. build the part tree (only when ``parse_body`` is set);
3. pick the first ``text/html`` and first ``text/plain`` body parts;
4. collect attachments in tree order;
5. when there is an HTML body, flag attachments it references via
   ``cid:<content-id>`` as inline.

The raw bytes are kept verbatim so :meth:`Message.save` re-emits exactly
what was loaded.
"""

from __future__ import annotations

import errno
import io
import shutil
from collections.abc import Iterable
from os import PathLike
from pathlib import Path
from typing import Any, BinaryIO

import structlog

from .addresses import render_addresses
from .header import MessageHeader, RfcMailAddress, extract_headers_and_body
from .models import AttachmentSummary, MessageSummary
from .part import DEFAULT_CHARSET, MessagePart, build_part_tree
from .traverse import AttachmentFinder, FindBodyPartWithMediaType

logger = structlog.get_logger()


class Message:
    """A parsed RFC 822 / MIME message."""

    def __init__(
        self,
        raw_message_content: bytes,
        parse_body: bool = True,
        *,
        default_charset: str = DEFAULT_CHARSET,
        log: Any = None,
    ) -> None:
        if not isinstance(raw_message_content, (bytes, bytearray)):
            raise ValueError("raw_message_content must be bytes")

        self._log = log = log if log is not None else logger
        log.debug("message_parsing_started", size=len(raw_message_content), parse_body=parse_body)

        self._raw_message = bytes(raw_message_content)
        self._headers, body = extract_headers_and_body(self._raw_message)
        self._message_part: MessagePart | None = None
        self._html_body: MessagePart | None = None
        self._text_body: MessagePart | None = None
        self._attachments: tuple[MessagePart, ...] | None = None

        if parse_body:
            self._message_part = build_part_tree(body, self._headers, default_charset=default_charset)

            finder = FindBodyPartWithMediaType()
            self._html_body = finder.visit_message(self, "text/html")
            if self._html_body is not None:
                self._html_body.is_html_body = True

            self._text_body = finder.visit_message(self, "text/plain")
            if self._text_body is not None:
                self._text_body.is_text_body = True

            attachments = AttachmentFinder().visit_message(self)
            if self._html_body is not None:
                _flag_inline_attachments(self._html_body, attachments)
            self._attachments = tuple(attachments)

        log.debug(
            "message_parsed",
            message_id=self.id,
            has_html_body=self._html_body is not None,
            has_text_body=self._text_body is not None,
            attachments=None if self._attachments is None else len(self._attachments),
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def id(self) -> str | None:
        """Message-ID without brackets, or ``None`` when the header is missing or empty."""
        return self._headers.message_id or None

    @property
    def headers(self) -> MessageHeader:
        return self._headers

    @property
    def message_part(self) -> MessagePart | None:
        """Root of the part tree; ``None`` when the body was not parsed."""
        return self._message_part

    @property
    def html_body(self) -> MessagePart | None:
        return self._html_body

    @property
    def text_body(self) -> MessagePart | None:
        return self._text_body

    @property
    def attachments(self) -> tuple[MessagePart, ...] | None:
        """Attachments in tree order.

        ``None`` only when the body was not parsed; otherwise a tuple,
        possibly empty.
        """
        return self._attachments

    @property
    def raw_message(self) -> bytes:
        return self._raw_message

    # ------------------------------------------------------------------
    # Address rendering
    # ------------------------------------------------------------------

    def get_email_addresses(
        self,
        addresses: Iterable[RfcMailAddress] | None,
        convert_to_href: bool,
        html: bool,
    ) -> str:
        """Render *addresses* as a ``"; "``-separated plain or HTML string."""
        self._log.debug("rendering_addresses", html=html, convert_to_href=convert_to_href)
        return render_addresses(addresses, convert_to_href, html)

    def summary(self) -> MessageSummary:
        headers = self._headers
        attachments = None
        if self._attachments is not None:
            attachments = [
                AttachmentSummary(
                    file_name=part.file_name,
                    media_type=part.media_type,
                    content_id=part.content_id,
                    size=len(part.body or b""),
                    inline=part.is_inline,
                )
                for part in self._attachments
            ]
        return MessageSummary(
            message_id=self.id,
            subject=headers.subject,
            sender=render_addresses([headers.from_] if headers.from_ else [], False, False),
            to=render_addresses(headers.to, False, False),
            cc=render_addresses(headers.cc, False, False),
            date=headers.date,
            body_parsed=self._message_part is not None,
            has_html_body=self._html_body is not None,
            has_text_body=self._text_body is not None,
            attachments=attachments,
        )

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save(self, path: str | PathLike[str]) -> None:
        """Write the raw message to *path*, truncating any existing file."""
        if path is None:
            raise ValueError("path is required")
        with open(path, "wb") as fh:
            self.save_to_stream(fh)

    def save_to_stream(self, stream: BinaryIO) -> None:
        """Write the raw message bytes verbatim to a binary *stream*."""
        if stream is None:
            raise ValueError("stream is required")
        stream.write(self._raw_message)

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: str | PathLike[str], *, default_charset: str = DEFAULT_CHARSET) -> Message:
        """Load and fully parse a message from a file containing a raw email."""
        if path is None:
            raise ValueError("path is required")
        path = Path(path)
        logger.debug("loading_message_file", path=str(path))
        if not path.is_file():
            raise FileNotFoundError(
                errno.ENOENT, "Cannot load message from non-existent file", str(path)
            )
        with path.open("rb") as fh:
            return cls.load_from_stream(fh, default_charset=default_charset)

    @classmethod
    def load_from_stream(
        cls, stream: BinaryIO, *, default_charset: str = DEFAULT_CHARSET
    ) -> Message:
        """Drain a binary *stream* and fully parse its contents."""
        if stream is None:
            raise ValueError("stream is required")
        buffer = io.BytesIO()
        shutil.copyfileobj(stream, buffer)
        logger.debug("message_stream_read", size=buffer.tell())
        return cls(buffer.getvalue(), default_charset=default_charset)

    def __repr__(self) -> str:
        return f"Message(id={self.id!r}, subject={self._headers.subject!r})"


def _flag_inline_attachments(html_body: MessagePart, attachments: list[MessagePart]) -> None:
    """Mark attachments referenced from the HTML body via ``cid:`` as inline.

    Attachments already inline are left alone; one without a content id
    never matches.
    """
    html = html_body.get_body_as_text()
    for attachment in attachments:
        if attachment.is_inline or not attachment.content_id:
            continue
        attachment.is_inline = f"cid:{attachment.content_id}" in html
