from __future__ import annotations

from enum import Enum, IntEnum


class StrEnum(str, Enum):
    def __str__(self) -> str:
        return self.value  # type: ignore

    def __repr__(self) -> str:
        return str(self)


class ContentKind(StrEnum):
    PLAIN = "plain"
    HTML = "html"

    @property
    def media_type(self) -> str:
        return f"text/{self.value}"


class Disposition(StrEnum):
    INLINE = "inline"
    ATTACHMENT = "attachment"


class Stage(StrEnum):
    """
    The part of the message being written when an I/O failure happened.
    """

    HEADERS = "headers"
    BODY = "body"
    ATTACHMENT = "attachment"
    ENVELOPE = "envelope"


class EncoderState(IntEnum):
    """
    States of the message assembler, in the only order they can be reached.
    """

    START = 0
    HEADERS_WRITTEN = 1
    MIXED_OPENED = 2
    ALTERNATIVE_WRITTEN = 3
    ATTACHMENTS_WRITTEN = 4
    MIXED_CLOSED = 5
    DONE = 6
