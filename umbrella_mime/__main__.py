"""Entry point for inspecting EML files.

Usage::

    python -m umbrella_mime summary message.eml
    python -m umbrella_mime addresses message.eml --html --href
"""

from __future__ import annotations

import argparse
import sys

import structlog

from .config import MimeConfig
from .logging import setup_logging
from .message import Message

logger = structlog.get_logger()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="python -m umbrella_mime")
    subparsers = parser.add_subparsers(dest="command", required=True)

    summary = subparsers.add_parser("summary", help="Print a JSON summary of a message")
    summary.add_argument("path", help="Path to a raw .eml file")

    addresses = subparsers.add_parser("addresses", help="Print rendered From/To/Cc lines")
    addresses.add_argument("path", help="Path to a raw .eml file")
    addresses.add_argument("--html", action="store_true", help="Render as HTML")
    addresses.add_argument(
        "--href",
        action="store_true",
        help="Render addresses as mailto: links (only with --html)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    config = MimeConfig()
    setup_logging(json=config.log_json, level=config.log_level)

    try:
        message = Message.load(args.path, default_charset=config.default_charset)
    except FileNotFoundError as exc:
        logger.error("message_file_not_found", path=exc.filename)
        print(f"No such file: {args.path}", file=sys.stderr)
        return 1

    if args.command == "summary":
        print(message.summary().model_dump_json(indent=2))
        return 0

    headers = message.headers
    senders = [headers.from_] if headers.from_ is not None else []
    for label, entries in (("From", senders), ("To", headers.to), ("Cc", headers.cc)):
        print(f"{label}: {message.get_email_addresses(entries, args.href, args.html)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
