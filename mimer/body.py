from __future__ import annotations

from mimer._internal._base64 import Base64LineWriter
from mimer.conf import settings
from mimer.headers import CRLF, header_line
from mimer.message import BodyPart
from mimer.protocols.io import Sink


def _write_text_part(sink: Sink, part: BodyPart, boundary: str, line_length: int) -> None:
    sink.write(f"--{boundary}".encode("ascii") + CRLF)
    sink.write(header_line("Content-Type", f"{part.kind.media_type}; charset=UTF-8"))
    sink.write(header_line("Content-Transfer-Encoding", "base64"))
    sink.write(CRLF)

    encoder = Base64LineWriter(sink, line_length)
    encoder.write(part.text.encode("utf-8"))
    encoder.close()


def write_body(
    sink: Sink,
    plain: BodyPart | None,
    html: BodyPart | None,
    boundary: str,
    *,
    line_length: int | None = None,
) -> None:
    """
    Write the `multipart/alternative` section holding the message body.

    The plain text part comes first and the HTML part second, the order of
    increasing preference. Both are UTF-8 and base64 encoded, which keeps
    any text, including lone `\\n` line endings, byte for byte intact.

    Without any part the section is still written, opening and closing
    with no sub-part in between.
    """
    line_length = line_length or settings.line_length

    sink.write(header_line("Content-Type", f'multipart/alternative; boundary="{boundary}"'))
    sink.write(CRLF)

    for part in (plain, html):
        if part is not None:
            _write_text_part(sink, part, boundary, line_length)

    sink.write(f"--{boundary}--".encode("ascii") + CRLF)
