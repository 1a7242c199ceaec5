"""Shared test fixtures for the umbrella_mime test suite."""

from __future__ import annotations

from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import pytest

# ------------------------------------------------------------------
# Sample EML builders
# ------------------------------------------------------------------


def _set_envelope(msg, *, subject: str, message_id: str | None) -> None:
    msg["Subject"] = subject
    msg["From"] = "Alice Sender <sender@example.com>"
    msg["To"] = "recipient@example.com"
    if message_id is not None:
        msg["Message-ID"] = message_id
    msg["Date"] = "Sun, 01 Jun 2025 12:00:00 +0000"


def _build_plain_email(
    *,
    body: str = "Hello, World!",
    message_id: str | None = "<test-001@example.com>",
) -> bytes:
    """Build a simple plain-text email as raw bytes."""
    msg = MIMEText(body, "plain")
    _set_envelope(msg, subject="Test Subject", message_id=message_id)
    return msg.as_bytes()


def _build_html_email(*, body_html: str = "<p>Hello</p>") -> bytes:
    msg = MIMEText(body_html, "html")
    _set_envelope(msg, subject="HTML Email", message_id="<html-001@example.com>")
    return msg.as_bytes()


def _image_part(
    *,
    content_id: str | None = None,
    disposition: str | None = None,
    filename: str = "image.png",
) -> MIMEBase:
    part = MIMEBase("image", "png")
    part.set_payload(b"\x89PNG\r\n\x1a\nfake image data")
    encoders.encode_base64(part)
    if content_id is not None:
        part.add_header("Content-ID", f"<{content_id}>")
    if disposition is not None:
        part.add_header("Content-Disposition", disposition, filename=filename)
    return part


def _build_multipart_email(
    *,
    body_text: str = "Plain body",
    body_html: str | None = "<p>HTML body</p>",
    attachments: list[tuple[str, str, bytes]] | None = None,
) -> bytes:
    """Build a multipart/mixed email with text, optional HTML and attachments."""
    msg = MIMEMultipart("mixed")
    _set_envelope(msg, subject="Multipart Email", message_id="<multi-001@example.com>")

    alt = MIMEMultipart("alternative")
    alt.attach(MIMEText(body_text, "plain"))
    if body_html is not None:
        alt.attach(MIMEText(body_html, "html"))
    msg.attach(alt)

    for filename, content_type, payload in attachments or []:
        maintype, subtype = content_type.split("/", 1)
        part = MIMEBase(maintype, subtype)
        part.set_payload(payload)
        encoders.encode_base64(part)
        part.add_header("Content-Disposition", "attachment", filename=filename)
        msg.attach(part)

    return msg.as_bytes()


def _build_related_email(
    *,
    body_html: str,
    images: list[MIMEBase],
    body_text: str | None = "Plain body",
) -> bytes:
    """Build multipart/related: an HTML (or text-only) body followed by images."""
    msg = MIMEMultipart("related")
    _set_envelope(msg, subject="Related Email", message_id="<related-001@example.com>")

    if body_text is not None:
        alt = MIMEMultipart("alternative")
        alt.attach(MIMEText(body_text, "plain"))
        if body_html:
            alt.attach(MIMEText(body_html, "html"))
        msg.attach(alt)
    elif body_html:
        msg.attach(MIMEText(body_html, "html"))

    for image in images:
        msg.attach(image)
    return msg.as_bytes()


@pytest.fixture
def plain_eml_bytes() -> bytes:
    return _build_plain_email()


@pytest.fixture
def html_eml_bytes() -> bytes:
    return _build_html_email()


@pytest.fixture
def multipart_eml_bytes() -> bytes:
    return _build_multipart_email(
        attachments=[
            ("report.pdf", "application/pdf", b"%PDF-1.4 fake pdf content"),
            ("data.csv", "text/csv", b"col1,col2\na,b\n"),
        ],
    )


@pytest.fixture
def related_eml_bytes() -> bytes:
    return _build_related_email(
        body_html='<p>Logo:</p><img src="cid:logo1"><p>Bye</p>',
        images=[
            _image_part(content_id="logo1"),
            _image_part(content_id="unused2"),
            _image_part(disposition="attachment", filename="photo.png"),
        ],
    )
