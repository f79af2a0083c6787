from __future__ import annotations

import io
import threading
from collections.abc import Iterator
from typing import Union

from mimer.exceptions import SourceConsumedError
from mimer.protocols.io import Readable
from mimer.types import BytesLike

SourceLike = Union["ByteSource", Readable, BytesLike]


class ByteSource:
    """
    A single-use, pull-based stream of attachment bytes.

    Wraps a readable binary object (an open file, a socket file, a
    `BytesIO`) or a bytes-like value. Nothing is read until
    :meth:`iter_chunks` is iterated, which is what lets attachments be
    registered long before the message is encoded.

    The stream can be consumed once. Encoding a message twice with the same
    sources raises :class:`~mimer.exceptions.SourceConsumedError` instead of
    silently producing an empty attachment.

    Example:
        ```python
        with open("report.pdf", "rb") as fp:
            builder.attach("report.pdf", ByteSource(fp))
            encode(builder.build(), sink)
        ```
    """

    def __init__(self, source: Readable | BytesLike) -> None:
        if isinstance(source, (bytes, bytearray, memoryview)):
            self._reader: Readable = io.BytesIO(bytes(source))
        elif isinstance(source, Readable):
            self._reader = source
        else:
            raise TypeError(
                f"Expected a readable binary object or bytes, got {type(source).__name__}."
            )
        self._consumed = False
        self._lock = threading.Lock()

    @classmethod
    def of(cls, source: SourceLike) -> ByteSource:
        if isinstance(source, ByteSource):
            return source
        return cls(source)

    @property
    def consumed(self) -> bool:
        return self._consumed

    def _claim(self) -> None:
        with self._lock:
            if self._consumed:
                raise SourceConsumedError("Attachment source has already been read.")
            self._consumed = True

    def iter_chunks(self, size: int) -> Iterator[bytes]:
        """
        Yield the content in chunks of at most `size` bytes.

        The source is claimed on the first call, before any byte is read.

        Raises:
            SourceConsumedError: If the source was already claimed.
            OSError: If the underlying object fails to read or is closed.
        """
        self._claim()
        return self._read(size)

    def _read(self, size: int) -> Iterator[bytes]:
        while True:
            try:
                chunk = self._reader.read(size)
            except ValueError as exc:
                # Closed file objects raise ValueError rather than OSError.
                raise OSError(str(exc)) from exc
            if not chunk:
                return
            yield bytes(chunk)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(consumed={self._consumed})"
