"""Serializable summaries of a parsed message."""

from __future__ import annotations

from pydantic import BaseModel, Field


class AttachmentSummary(BaseModel):
    """One attachment as seen by a consumer of the summary."""

    file_name: str = Field(description="File name from the disposition or content type")
    media_type: str = Field(description="Lower-cased MIME media type")
    content_id: str | None = Field(default=None, description="Content-ID without brackets")
    size: int = Field(description="Decoded body size in bytes")
    inline: bool = Field(description="Rendered in place inside the HTML body")


class MessageSummary(BaseModel):
    """Flat, JSON-friendly view of a :class:`~umbrella_mime.message.Message`."""

    message_id: str | None = Field(default=None, description="Message-ID without brackets")
    subject: str = Field(default="", description="Decoded subject line")
    sender: str = Field(default="", description="Rendered From address")
    to: str = Field(default="", description="Rendered To addresses")
    cc: str = Field(default="", description="Rendered Cc addresses")
    date: str = Field(default="", description="Raw Date header")
    body_parsed: bool = Field(description="Whether the body was parsed into a part tree")
    has_html_body: bool = Field(default=False)
    has_text_body: bool = Field(default=False)
    attachments: list[AttachmentSummary] | None = Field(
        default=None,
        description="Attachments in tree order; null when the body was not parsed",
    )
