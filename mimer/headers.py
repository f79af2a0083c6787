from __future__ import annotations

import itertools
import re
from email.charset import QP, Charset
from email.utils import format_datetime, quote
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mimer.message import Message
    from mimer.protocols.io import Sink

CRLF = b"\r\n"

# RFC 2047 caps a single encoded word at 75 characters.
ENCODED_WORD_LENGTH = 75

_LINE_BREAKS = re.compile(r"[\r\n]+")
_SPECIALS = re.compile(r'[][\\()<>@,:;".]')

_UTF8 = Charset("utf-8")
_UTF8.header_encoding = QP


def strip_line_breaks(raw: str) -> str:
    """
    Remove every carriage return and line feed from `raw`.

    A user controlled value containing `\\r\\n` could otherwise terminate
    the header it is written into and start a forged one.
    """
    return _LINE_BREAKS.sub("", raw)


def encode_header_value(raw: str) -> str:
    """
    Make `raw` safe to place in a header.

    Line breaks are stripped first. If the remaining text is not pure ASCII
    it is Q-encoded (RFC 1342) as one or more UTF-8 encoded words separated
    by a space. ASCII text is returned unchanged.

    Example:
        ```python
        encode_header_value("Café")  # '=?utf-8?q?Caf=C3=A9?='
        ```
    """
    value = strip_line_breaks(raw)
    if value.isascii():
        return value
    words = _UTF8.header_encode_lines(value, itertools.repeat(ENCODED_WORD_LENGTH))
    return " ".join(words)


def format_display_name(name: str) -> str:
    """
    Render a display name for an address header. Non-ASCII names become
    encoded words, ASCII names containing specials are quoted.
    """
    value = strip_line_breaks(name)
    if not value.isascii():
        return encode_header_value(value)
    if _SPECIALS.search(value):
        return f'"{quote(value)}"'
    return value


def format_from(address: str, name: str = "") -> str:
    if not name:
        return address
    return f"{format_display_name(name)} <{address}>"


def header_line(name: str, value: str) -> bytes:
    """
    Serialize a single `Name: value` header terminated by CRLF.
    """
    return f"{name}: {value}".encode("utf-8") + CRLF


def write_headers(sink: Sink, message: Message) -> None:
    """
    Write the top level headers of `message` in their fixed order.

    `From`, `Mime-Version`, `Date`, `Reply-To` (when set), `Subject`, one
    `To` line per recipient, one `CC` line per recipient and, only when the
    message asks for it, one `BCC` line per blind copy.

    Errors raised by `sink.write` propagate unchanged.
    """
    sink.write(header_line("From", format_from(message.sender, message.sender_name)))
    sink.write(header_line("Mime-Version", "1.0"))
    sink.write(header_line("Date", format_datetime(message.date)))

    if message.reply_to:
        sink.write(header_line("Reply-To", message.reply_to))

    sink.write(header_line("Subject", encode_header_value(message.subject)))

    for address in message.to:
        sink.write(header_line("To", address))

    for address in message.cc:
        sink.write(header_line("CC", address))

    if message.write_bcc_header:
        for address in message.bcc:
            sink.write(header_line("BCC", address))
