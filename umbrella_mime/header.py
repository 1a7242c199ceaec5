"""Header extraction from raw RFC 822 bytes.

Uses ``email.parser.BytesHeaderParser`` which parses *only* the headers
and leaves the rest of the input as an undecoded payload, so the body
bytes come back exactly as they were.  Header values are read as raw
text; only Subject, Content-Description and address display names are
run through RFC 2047 encoded-word decoding.
"""

from __future__ import annotations

import email.errors
import email.header
import email.parser
import email.utils
import re
from dataclasses import dataclass, field
from email.message import Message as _StdlibMessage

_MAILBOX_RE = re.compile(r"^[^@\s<>]+@[^@\s<>]+$")
_FOLD_RE = re.compile(r"\r?\n(?=[ \t])")


@dataclass(frozen=True)
class RfcMailAddress:
    """One mailbox from an address header (From, To, Cc, ...)."""

    display_name: str = ""
    address: str = ""

    @property
    def has_valid_mail_address(self) -> bool:
        return bool(self.address) and _MAILBOX_RE.match(self.address) is not None

    def __str__(self) -> str:
        if self.display_name and self.address:
            return f"{self.display_name} <{self.address}>"
        return self.display_name or self.address


@dataclass(frozen=True)
class ContentType:
    """Parsed ``Content-Type`` header."""

    media_type: str = "text/plain"
    params: dict[str, str] = field(default_factory=dict)

    @property
    def charset(self) -> str | None:
        return self.params.get("charset")

    @property
    def boundary(self) -> str | None:
        return self.params.get("boundary")

    @property
    def name(self) -> str | None:
        return self.params.get("name")


@dataclass(frozen=True)
class ContentDisposition:
    """Parsed ``Content-Disposition`` header."""

    disposition_type: str
    params: dict[str, str] = field(default_factory=dict)

    @property
    def inline(self) -> bool:
        return self.disposition_type == "inline"

    @property
    def file_name(self) -> str | None:
        return self.params.get("filename")


@dataclass(frozen=True)
class MessageHeader:
    """Header set of a message or of a single body part.

    ``raw_block`` holds the header bytes exactly as they appeared, blank
    separator line included, when the set came from
    :func:`extract_headers_and_body`.
    """

    message_id: str = ""
    subject: str = ""
    date: str = ""
    from_: RfcMailAddress | None = None
    reply_to: list[RfcMailAddress] = field(default_factory=list)
    to: list[RfcMailAddress] = field(default_factory=list)
    cc: list[RfcMailAddress] = field(default_factory=list)
    bcc: list[RfcMailAddress] = field(default_factory=list)
    in_reply_to: list[str] = field(default_factory=list)
    references: list[str] = field(default_factory=list)
    content_type: ContentType = field(
        default_factory=lambda: ContentType(params={"charset": "us-ascii"})
    )
    content_transfer_encoding: str = "7bit"
    content_disposition: ContentDisposition | None = None
    content_id: str | None = None
    content_description: str | None = None
    mime_version: str | None = None
    raw_headers: list[tuple[str, str]] = field(default_factory=list)
    raw_block: bytes = b""

    def get_all(self, name: str) -> list[str]:
        """Return every value of header *name*, matched case-insensitively."""
        wanted = name.lower()
        return [value for key, value in self.raw_headers if key.lower() == wanted]

    @classmethod
    def from_message(cls, msg: _StdlibMessage, raw_block: bytes = b"") -> MessageHeader:
        """Build a header set from a stdlib message or sub-part.

        Values come from ``raw_items()`` so no structured header class
        ever gets to reinterpret (or choke on) them.
        """
        raw_headers = [(key, _unfold(str(value))) for key, value in msg.raw_items()]

        def raw(name: str) -> str:
            wanted = name.lower()
            for key, value in raw_headers:
                if key.lower() == wanted:
                    return value.strip()
            return ""

        senders = parse_mail_addresses(raw("From"))
        return cls(
            message_id=_strip_brackets(raw("Message-ID")),
            subject=_decode_words(raw("Subject")),
            date=raw("Date"),
            from_=senders[0] if senders else None,
            reply_to=parse_mail_addresses(raw("Reply-To")),
            to=parse_mail_addresses(raw("To")),
            cc=parse_mail_addresses(raw("Cc")),
            bcc=parse_mail_addresses(raw("Bcc")),
            in_reply_to=_parse_id_list(raw("In-Reply-To")),
            references=_parse_id_list(raw("References")),
            content_type=_parse_content_type(msg),
            content_transfer_encoding=raw("Content-Transfer-Encoding").lower() or "7bit",
            content_disposition=_parse_content_disposition(msg),
            content_id=_strip_brackets(raw("Content-ID")) or None,
            content_description=_decode_words(raw("Content-Description")) or None,
            mime_version=raw("MIME-Version") or None,
            raw_headers=raw_headers,
            raw_block=raw_block,
        )


def extract_headers_and_body(raw: bytes) -> tuple[MessageHeader, bytes]:
    """Split raw RFC 822 bytes into a parsed header set and the body bytes.

    The header block ends at the first empty line, whatever its line
    ending.  Input without an empty line is all headers and has an
    empty body.
    """
    if not isinstance(raw, (bytes, bytearray)):
        raise ValueError("raw message content must be bytes")

    raw = bytes(raw)
    parser = email.parser.BytesHeaderParser()
    msg = parser.parsebytes(raw)
    payload = msg.get_payload()
    body = payload.encode("ascii", "surrogateescape") if isinstance(payload, str) else b""
    raw_block = raw[: len(raw) - len(body)]
    return MessageHeader.from_message(msg, raw_block), body


def parse_mail_addresses(value: str | None) -> list[RfcMailAddress]:
    """Parse an RFC 2822 address list into :class:`RfcMailAddress` entries.

    Entries without a usable mailbox keep their text as the display name.
    """
    if not value:
        return []
    result: list[RfcMailAddress] = []
    for name, addr in email.utils.getaddresses([value]):
        if not name and not addr:
            continue
        entry = RfcMailAddress(display_name=_decode_words(name), address=addr)
        if not entry.has_valid_mail_address and not name:
            entry = RfcMailAddress(display_name=addr, address=addr)
        result.append(entry)
    return result


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _unfold(value: str) -> str:
    return _FOLD_RE.sub("", value).rstrip("\r\n")


def _decode_words(value: str) -> str:
    """Decode RFC 2047 encoded words; undecodable input is returned as-is."""
    if "=?" not in value:
        return value
    try:
        return str(email.header.make_header(email.header.decode_header(value)))
    except (email.errors.HeaderParseError, LookupError, UnicodeError):
        return value


def _strip_brackets(value: str) -> str:
    return value.strip().strip("<>").strip()


def _parse_id_list(value: str) -> list[str]:
    return [_strip_brackets(token) for token in value.split() if _strip_brackets(token)]


def _collect_params(msg: _StdlibMessage, header: str) -> dict[str, str]:
    params: dict[str, str] = {}
    for key, value in msg.get_params(failobj=[], header=header)[1:]:
        params[key.lower()] = email.utils.collapse_rfc2231_value(value)
    return params


def _parse_content_type(msg: _StdlibMessage) -> ContentType:
    if msg.get("Content-Type") is None:
        return ContentType(params={"charset": "us-ascii"})
    return ContentType(
        media_type=msg.get_content_type(),
        params=_collect_params(msg, "content-type"),
    )


def _parse_content_disposition(msg: _StdlibMessage) -> ContentDisposition | None:
    if msg.get("Content-Disposition") is None:
        return None
    return ContentDisposition(
        disposition_type=msg.get_content_disposition() or "",
        params=_collect_params(msg, "content-disposition"),
    )
