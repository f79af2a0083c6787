from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import anyio

from mimer.backends.base import BaseMailBackend
from mimer.encoder import encode
from mimer.logging import logger
from mimer.message import Message


class FileBackend(BaseMailBackend):
    """
    A mail backend that streams encoded messages to `.eml` files.

    Useful for **development, debugging, or archiving**. The files are
    plain RFC 2045 messages and open in any email client. Attachments are
    streamed straight from their sources into the file.
    """

    def __init__(self, directory: str, create: bool = True) -> None:
        """
        Initialize the file backend.

        Args:
            directory: Path to the directory where `.eml` files will be stored.
            create: Whether to automatically create the directory if it does not exist.
        """
        self.directory = Path(directory)
        self.create = create

    async def open(self) -> None:
        """
        Ensure the target directory exists if `create=True`.
        """
        if self.create:
            self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, message: Message) -> Path:
        """
        Filenames are prefixed with a UTC timestamp to avoid collisions,
        followed by a sanitized subject line.
        """
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S-%f")
        safe_subject = "".join(
            char for char in (message.subject or "no-subject") if char.isalnum() or char in "-_"
        )[:60]
        return self.directory / f"{timestamp}-{safe_subject}.eml"

    def _write(self, message: Message, file_path: Path) -> int:
        try:
            with open(file_path, "wb") as file:
                return encode(message, file)
        except BaseException:
            file_path.unlink(missing_ok=True)
            raise

    async def send(self, message: Message) -> None:
        """
        Encode a message into a new `.eml` file.

        A file left behind by a failed encode is removed before the error
        is raised.
        """
        file_path = self.path_for(message)
        written = await anyio.to_thread.run_sync(self._write, message, file_path)
        logger.info(f"{message!r} written to {file_path.name} ({written} bytes)")
