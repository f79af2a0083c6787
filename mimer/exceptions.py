from __future__ import annotations

from mimer.enums import Stage


class MailError(Exception):
    """
    Base exception for all errors raised by mimer.

    All other exceptions in the package inherit from this, making it easy
    to catch or filter mail-specific errors.
    """

    ...


class EntropyError(MailError):
    """
    Raised when the operating system cannot supply random bytes for a
    MIME boundary.

    This is never recoverable. A predictable boundary would let attacker
    controlled content forge MIME parts, so the message is abandoned before
    anything reaches the sink.
    """

    ...


class MessageIOError(MailError, OSError):
    """
    Raised when writing to the sink or reading an attachment source fails.

    The original exception is always chained as ``__cause__``.

    Attributes:
        stage: The :class:`~mimer.enums.Stage` that was being written.
        index: Zero-based position of the attachment that failed, when
            ``stage`` is ``Stage.ATTACHMENT``.

    Example:
        ```python
        try:
            encode(message, sink)
        except MessageIOError as exc:
            log.error("failed at %s (attachment %s)", exc.stage, exc.index)
        ```
    """

    def __init__(self, message: str, *, stage: Stage, index: int | None = None) -> None:
        super().__init__(message)
        self.stage = stage
        self.index = index

    def __str__(self) -> str:
        location = str(self.stage) if self.index is None else f"{self.stage} #{self.index}"
        return f"[{location}] {self.args[0]}"


class SourceConsumedError(MailError):
    """
    Raised when an attachment source is read a second time.

    Attachment sources are single use. Encoding the same message twice
    requires building it again with fresh sources.
    """

    ...


class BackendNotConfigured(MailError):
    """
    Raised when a mail operation is attempted without a configured backend.

    Example:
        ```python
        mailer = Mailer()
        await mailer.send(message)  # raises BackendNotConfigured
        ```
    """

    ...


class InvalidMessage(MailError):
    """
    Raised when a `Message` is not complete enough to be handed to a backend.

    Typical causes:
        - Missing recipients (`to`, `cc`, or `bcc`).
        - Missing sender address.
    """

    ...
