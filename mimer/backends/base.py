from __future__ import annotations

import abc
from collections.abc import Sequence

from mimer.message import Message


class BaseMailBackend(abc.ABC):
    """
    Abstract base class for the collaborators that take encoded messages
    away from mimer.

    A backend defines *where* an encoded message goes. Subclasses must
    implement :meth:`send` at a minimum, and may override :meth:`open`,
    :meth:`close`, or :meth:`send_many` to manage resources.

    Built-in backends:
        - FileBackend: Writes messages to `.eml` files.
        - InMemoryBackend: Stores messages in memory (for testing).
    """

    async def open(self) -> None:
        """
        Prepare resources required for sending messages.
        """
        return None

    async def close(self) -> None:
        """
        Release resources allocated by the backend.
        """
        return None

    @abc.abstractmethod
    async def send(self, message: Message) -> None:
        """
        Encode and hand over a single message.

        Args:
            message: The :class:`Message` to deliver.

        Raises:
            MailError: If the message cannot be encoded or stored.
        """
        raise NotImplementedError

    async def send_many(self, messages: Sequence[Message]) -> None:
        """
        Send multiple messages in sequence.

        The default implementation simply iterates and calls :meth:`send`.
        """
        for message in messages:
            await self.send(message)
