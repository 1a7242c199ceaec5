"""Depth-first visitors over a message's part tree."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .part import MessagePart

if TYPE_CHECKING:
    from .message import Message

T = TypeVar("T")


class MessageTraverser(ABC, Generic[T]):
    """Walk the part tree of a message and compute an answer."""

    def visit_message(self, message: Message, *args: Any) -> T | None:
        if message is None:
            raise ValueError("message is required")
        if message.message_part is None:
            return None
        return self.visit_message_part(message.message_part, *args)

    @abstractmethod
    def visit_message_part(self, part: MessagePart, *args: Any) -> T | None:
        """Compute the answer for *part* and, for multiparts, its children."""


class FindBodyPartWithMediaType(MessageTraverser[MessagePart]):
    """Find the first non-attachment part with a given media type.

    Stops at the first match, so later siblings are never visited.
    """

    def visit_message_part(self, part: MessagePart, media_type: str) -> MessagePart | None:
        if part.is_multipart:
            for child in part.message_parts:
                found = self.visit_message_part(child, media_type)
                if found is not None:
                    return found
            return None

        if part.media_type == media_type.lower() and not part.is_attachment:
            return part
        return None


class AttachmentFinder(MessageTraverser[list[MessagePart]]):
    """Collect every part flagged as an attachment, in tree order."""

    def visit_message(self, message: Message, *args: Any) -> list[MessagePart]:
        return super().visit_message(message, *args) or []

    def visit_message_part(self, part: MessagePart, *args: Any) -> list[MessagePart]:
        if part.is_multipart:
            found: list[MessagePart] = []
            for child in part.message_parts:
                found.extend(self.visit_message_part(child))
            return found
        return [part] if part.is_attachment else []
