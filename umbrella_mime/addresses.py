"""Render address header values as display strings, plain or HTML."""

from __future__ import annotations

from collections.abc import Iterable
from html import escape

from .header import RfcMailAddress

SEPARATOR = "; "


def render_addresses(
    addresses: Iterable[RfcMailAddress] | None,
    convert_to_href: bool,
    html: bool,
) -> str:
    """Join *addresses* into one string separated by ``"; "``.

    Parameters
    ----------
    addresses:
        Mailboxes to render.  ``None`` renders as ``""``.
    convert_to_href:
        Emit ``mailto:`` anchors.  Only honoured together with *html*.
    html:
        HTML-escape names and addresses and use ``&nbsp;&lt;...&gt;``
        instead of `` <...>`` around the address.
    """
    result = ""
    if addresses is None:
        return result

    for entry in addresses:
        # Keyed off what has been emitted so far, so an entry that renders
        # empty still earns a separator before the next one.
        if result:
            result += SEPARATOR

        email_address = entry.address if entry.has_valid_mail_address else ""
        display_name = entry.display_name or ""

        if email_address.casefold() == display_name.casefold():
            display_name = ""

        if html:
            email_address = html_encode(email_address)
            display_name = html_encode(display_name)

        if convert_to_href and html and email_address:
            result += f'<a href="mailto:{email_address}">{display_name or email_address}</a>'
            continue

        if display_name:
            result += display_name

        begin_tag = end_tag = ""
        if display_name:
            begin_tag, end_tag = ("&nbsp;&lt;", "&gt;") if html else (" <", ">")

        if email_address:
            result += begin_tag + email_address + end_tag

    return result


def html_encode(value: str) -> str:
    """Entity-encode *value* for HTML output.

    Besides the five markup characters, U+00A0 to U+00FF and anything
    outside the BMP become numeric references; the apostrophe is
    written as ``&#39;``.
    """
    escaped = escape(value, quote=True).replace("&#x27;", "&#39;")
    return "".join(
        f"&#{ord(ch)};" if 0xA0 <= ord(ch) <= 0xFF or ord(ch) > 0xFFFF else ch
        for ch in escaped
    )
