"""Umbrella MIME — parse raw EML into a classified part tree.

Public API re-exported here for convenience::

    from umbrella_mime import Message, render_addresses
"""

from .addresses import render_addresses
from .config import MimeConfig
from .header import (
    ContentDisposition,
    ContentType,
    MessageHeader,
    RfcMailAddress,
    extract_headers_and_body,
    parse_mail_addresses,
)
from .logging import setup_logging
from .message import Message
from .models import AttachmentSummary, MessageSummary
from .part import MessagePart, build_part_tree
from .traverse import AttachmentFinder, FindBodyPartWithMediaType, MessageTraverser

__all__ = [
    "AttachmentFinder",
    "AttachmentSummary",
    "ContentDisposition",
    "ContentType",
    "FindBodyPartWithMediaType",
    "Message",
    "MessageHeader",
    "MessagePart",
    "MessageSummary",
    "MessageTraverser",
    "build_part_tree",
    "MimeConfig",
    "RfcMailAddress",
    "extract_headers_and_body",
    "parse_mail_addresses",
    "render_addresses",
    "setup_logging",
]
