from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Sink(Protocol):
    """
    Anything the encoder can write bytes into.

    Files opened in binary mode, `io.BytesIO` and socket files all qualify.
    The return value of `write` is ignored; short writes are the sink's
    responsibility.
    """

    def write(self, data: bytes, /) -> Any: ...


@runtime_checkable
class Readable(Protocol):
    """
    A pull-based byte stream. `read(size)` returns at most `size` bytes and
    an empty bytes object at end of stream.
    """

    def read(self, size: int = -1, /) -> bytes: ...
