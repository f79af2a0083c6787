from __future__ import annotations

from binascii import b2a_base64

from mimer.protocols.io import Sink

CRLF = b"\r\n"


class Base64LineWriter:
    """
    Incremental base64 encoder folding its output into CRLF terminated
    lines of `line_length` characters.

    Input is accepted in chunks of any size. Only the bytes that do not yet
    fill a whole line are kept between calls, so the memory used does not
    depend on the total size of the content. Every line but the last is
    exactly `line_length` characters long.
    """

    def __init__(self, sink: Sink, line_length: int = 76) -> None:
        if line_length % 4 != 0 or line_length <= 0:
            raise ValueError("line_length must be a positive multiple of 4.")
        self.sink = sink
        self.group = line_length // 4 * 3
        self._pending = b""

    def write(self, data: bytes) -> None:
        if self._pending:
            data = self._pending + data
        size = len(data) - len(data) % self.group
        if size:
            view = memoryview(data)
            lines = [
                b2a_base64(view[start : start + self.group], newline=False)
                for start in range(0, size, self.group)
            ]
            lines.append(b"")
            self.sink.write(CRLF.join(lines))
        self._pending = data[size:]

    def close(self) -> None:
        """
        Flush the final, possibly shorter and padded, line.
        """
        if self._pending:
            self.sink.write(b2a_base64(self._pending, newline=False) + CRLF)
            self._pending = b""
