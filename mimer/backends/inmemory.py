from __future__ import annotations

from dataclasses import dataclass

import anyio

from mimer.backends.base import BaseMailBackend
from mimer.encoder import encode_to_bytes
from mimer.message import Message


@dataclass(frozen=True)
class SentMessage:
    message: Message
    raw: bytes


class InMemoryBackend(BaseMailBackend):
    """
    A mail backend that encodes messages and keeps the result in memory.

    This backend is primarily intended for **unit tests**. Each sent
    message is appended to the public :attr:`outbox` list together with its
    encoded bytes.

    Example:
        ```python
        backend = InMemoryBackend()
        mailer = Mailer(backend=backend)

        await mailer.send(message)

        assert b"Subject: Test" in backend.outbox[0].raw
        ```
    """

    def __init__(self) -> None:
        self.outbox: list[SentMessage] = []

    async def send(self, message: Message) -> None:
        raw = await anyio.to_thread.run_sync(encode_to_bytes, message)
        self.outbox.append(SentMessage(message=message, raw=raw))
