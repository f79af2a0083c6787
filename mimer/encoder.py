from __future__ import annotations

import io
from collections.abc import Iterator
from contextlib import contextmanager

from mimer.attachments import write_attachment
from mimer.body import write_body
from mimer.boundary import generate_boundary
from mimer.conf import settings
from mimer.enums import EncoderState, Stage
from mimer.exceptions import MessageIOError
from mimer.headers import CRLF, header_line, write_headers
from mimer.logging import logger
from mimer.message import Message
from mimer.protocols.io import Sink


class _CountingSink:
    """
    Forwards writes to the real sink and counts the bytes that went through.
    """

    def __init__(self, sink: Sink) -> None:
        self._sink = sink
        self.count = 0

    def write(self, data: bytes) -> None:
        try:
            self._sink.write(data)
        except ValueError as exc:
            # Closed file objects raise ValueError rather than OSError.
            raise OSError(str(exc)) from exc
        self.count += len(data)


class MessageEncoder:
    """
    Single-pass encoder turning a :class:`~mimer.message.Message` into MIME
    bytes.

    The encoder walks through the states of
    :class:`~mimer.enums.EncoderState` strictly in order:

        START -> HEADERS_WRITTEN -> MIXED_OPENED -> ALTERNATIVE_WRITTEN
              -> ATTACHMENTS_WRITTEN -> MIXED_CLOSED -> DONE

    Any failure stops it where it is and the error is raised. `aborted_at`
    then holds the state that was current when it failed. Once the
    `multipart/mixed` envelope is open its closing delimiter is written on
    every exit path, failed or not. Output of a failed encode is still
    unusable and must be discarded by the caller.

    An encoder is used once. Attachment sources are single use too, so
    encoding the same message again raises
    :class:`~mimer.exceptions.SourceConsumedError`.

    Example:
        ```python
        with open("message.eml", "wb") as fp:
            written = MessageEncoder(message).encode(fp)
        ```
    """

    def __init__(
        self,
        message: Message,
        *,
        line_length: int | None = None,
        chunk_size: int | None = None,
        default_content_type: str | None = None,
    ) -> None:
        self.message = message
        self.line_length = line_length or settings.line_length
        self.chunk_size = chunk_size or settings.chunk_size
        self.default_content_type = default_content_type or settings.default_content_type
        self.state = EncoderState.START
        self.aborted_at: EncoderState | None = None
        self.attachments_written = 0
        self.bytes_written = 0

    def _advance(self, state: EncoderState) -> None:
        logger.debug(f"{self.message!r}: {self.state.name} -> {state.name}")
        self.state = state

    @contextmanager
    def _stage(self, stage: Stage, index: int | None = None) -> Iterator[None]:
        try:
            yield
        except MessageIOError:
            raise
        except OSError as exc:
            raise MessageIOError(f"{exc}", stage=stage, index=index) from exc

    def encode(self, sink: Sink) -> int:
        """
        Write the whole message to `sink` and return the number of bytes
        written.

        Raises:
            EntropyError: If no boundary could be generated. Nothing has
                been written to the sink in that case.
            MessageIOError: If the sink or an attachment source failed.
            SourceConsumedError: If an attachment source was already read.
        """
        if self.state is not EncoderState.START:
            raise RuntimeError("A MessageEncoder can only encode once.")

        out = _CountingSink(sink)
        try:
            self._encode(out)
        except BaseException:
            if self.aborted_at is None:
                self.aborted_at = self.state
            raise
        finally:
            self.bytes_written = out.count
        return self.bytes_written

    def _encode(self, out: _CountingSink) -> None:
        message = self.message

        # Both boundaries are drawn before anything reaches the sink.
        mixed = generate_boundary()
        alternative = generate_boundary()

        with self._stage(Stage.HEADERS):
            # Headers are small and must arrive complete, so they are
            # buffered and handed over in one write.
            buffer = io.BytesIO()
            write_headers(buffer, message)
            buffer.write(header_line("Content-Type", f'multipart/mixed; boundary="{mixed}"'))
            buffer.write(CRLF)
            out.write(buffer.getvalue())
        self._advance(EncoderState.HEADERS_WRITTEN)
        self._advance(EncoderState.MIXED_OPENED)

        delimiter = f"--{mixed}".encode("ascii") + CRLF
        failed = True
        try:
            with self._stage(Stage.BODY):
                out.write(delimiter)
                write_body(
                    out, message.plain, message.html, alternative, line_length=self.line_length
                )
            self._advance(EncoderState.ALTERNATIVE_WRITTEN)
            self._advance(EncoderState.ATTACHMENTS_WRITTEN)

            for index, attachment in enumerate(message.attachments):
                with self._stage(Stage.ATTACHMENT, index):
                    out.write(delimiter)
                    write_attachment(
                        out,
                        attachment,
                        line_length=self.line_length,
                        chunk_size=self.chunk_size,
                        default_content_type=self.default_content_type,
                    )
                self.attachments_written += 1
            failed = False
        finally:
            self._close_envelope(out, mixed, failed)

        self._advance(EncoderState.DONE)

    def _close_envelope(self, out: _CountingSink, boundary: str, failed: bool) -> None:
        state = self.state
        try:
            with self._stage(Stage.ENVELOPE):
                out.write(f"--{boundary}--".encode("ascii") + CRLF)
        except MessageIOError as exc:
            if not failed:
                raise
            # The error that interrupted the body is the one reported.
            logger.warning(f"{self.message!r}: could not close the multipart envelope: {exc}")
            return
        if failed:
            self.state = EncoderState.MIXED_CLOSED
            self.aborted_at = state
            return
        self._advance(EncoderState.MIXED_CLOSED)


def encode(message: Message, sink: Sink) -> int:
    """
    Encode `message` into `sink` and return the number of bytes written.
    """
    return MessageEncoder(message).encode(sink)


def encode_to_bytes(message: Message) -> bytes:
    """
    Encode `message` in memory and return the complete MIME bytes.
    """
    buffer = io.BytesIO()
    MessageEncoder(message).encode(buffer)
    return buffer.getvalue()
