from __future__ import annotations

import io
import re
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

BOUNDARY_RE = re.compile(rb'multipart/(mixed|alternative); boundary="([0-9a-f]+)"')

FIXED_DATE = datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone(timedelta(hours=-7)))


def boundaries(raw: bytes) -> dict[str, str]:
    return {kind.decode(): value.decode() for kind, value in BOUNDARY_RE.findall(raw)}


def header_lines(raw: bytes) -> list[str]:
    """
    The top level header lines, up to the blank line ending them.
    """
    head, _, _ = raw.partition(b"\r\n\r\n")
    return head.decode("utf-8").split("\r\n")


class FlakySink:
    """
    Collects written bytes and raises `OSError` for writes matching `fail_on`.

    With `stay_broken`, every write after the first failure fails too.
    """

    def __init__(self, fail_on: Callable[[bytes], bool], stay_broken: bool = False) -> None:
        self.fail_on = fail_on
        self.stay_broken = stay_broken
        self.broken = False
        self.buffer = io.BytesIO()

    def write(self, data: bytes) -> int:
        if self.broken or self.fail_on(data):
            self.broken = self.stay_broken
            raise OSError("broken pipe")
        return self.buffer.write(data)

    def getvalue(self) -> bytes:
        return self.buffer.getvalue()


class TrackingReader:
    """
    A readable returning at most `max_read` bytes per call and recording
    every requested size.
    """

    def __init__(self, data: bytes, max_read: int | None = None, fail: bool = False) -> None:
        self._data = io.BytesIO(data)
        self.max_read = max_read
        self.fail = fail
        self.requests: list[int] = []

    def read(self, size: int = -1) -> bytes:
        self.requests.append(size)
        if self.fail:
            raise OSError("disk gone")
        if self.max_read is not None:
            size = min(size, self.max_read)
        return self._data.read(size)


