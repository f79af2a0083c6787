from __future__ import annotations

import mimetypes
from email.utils import quote

from mimer._internal._base64 import Base64LineWriter
from mimer.conf import settings
from mimer.enums import Disposition
from mimer.headers import CRLF, encode_header_value, header_line, strip_line_breaks
from mimer.message import Attachment
from mimer.protocols.io import Sink


def guess_content_type(filename: str, default: str | None = None) -> str:
    """
    Map the extension of `filename` to a media type, falling back to
    `default` (the `default_content_type` setting when omitted).
    """
    content_type, _ = mimetypes.guess_type(filename, strict=False)
    return content_type or default or settings.default_content_type


def write_attachment(
    sink: Sink,
    attachment: Attachment,
    *,
    line_length: int | None = None,
    chunk_size: int | None = None,
    default_content_type: str | None = None,
) -> None:
    """
    Write the headers and base64 body of one attachment part.

    The delimiter line of the enclosing `multipart/mixed` section is
    written by the caller. The attachment source is read here, chunk by
    chunk, and never held in memory as a whole.

    Raises:
        SourceConsumedError: If the source was already read.
        OSError: If reading the source or writing to the sink fails.
    """
    line_length = line_length or settings.line_length
    chunk_size = chunk_size or settings.chunk_size

    name = strip_line_breaks(attachment.filename)
    filename = quote(encode_header_value(name))
    disposition = Disposition.INLINE if attachment.inline else Disposition.ATTACHMENT

    sink.write(header_line("Content-Type", guess_content_type(name, default_content_type)))
    sink.write(header_line("Content-Transfer-Encoding", "base64"))
    sink.write(header_line("Content-Disposition", f'{disposition}; filename="{filename}"'))
    if attachment.inline:
        sink.write(header_line("Content-ID", f"<{name}>"))
    sink.write(CRLF)

    encoder = Base64LineWriter(sink, line_length)
    for chunk in attachment.source.iter_chunks(chunk_size):
        encoder.write(chunk)
    encoder.close()
