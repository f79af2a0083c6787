from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from mimer.conf import settings
from mimer.enums import ContentKind
from mimer.headers import strip_line_breaks
from mimer.sources import ByteSource, SourceLike


@dataclass(frozen=True)
class BodyPart:
    kind: ContentKind
    text: str


@dataclass(frozen=True)
class Attachment:
    """
    A file attached to a message.

    `source` is not read until the message is encoded. Inline attachments
    are referenced from the HTML body with `cid:<filename>`.
    """

    filename: str
    source: ByteSource
    inline: bool = False


@dataclass(frozen=True)
class Message:
    """
    An immutable, fully validated email message ready to be encoded.

    Instances are produced by :class:`MessageBuilder`. Every address, the
    subject and the sender name are free of line breaks.
    """

    sender: str
    date: datetime
    sender_name: str = ""
    reply_to: str = ""
    subject: str = ""
    to: tuple[str, ...] = ()
    cc: tuple[str, ...] = ()
    bcc: tuple[str, ...] = ()
    write_bcc_header: bool = False
    plain: BodyPart | None = None
    html: BodyPart | None = None
    attachments: tuple[Attachment, ...] = field(default=())

    def all_recipients(self) -> list[str]:
        """
        Collect all recipients of the email (To + Cc + Bcc).

        Blind copies are always included here, whether or not the `BCC`
        header is written, since delivery needs them in the envelope.
        """
        return [*self.to, *self.cc, *self.bcc]

    def __repr__(self) -> str:
        # Addresses and content stay out of logs.
        return f"{self.__class__.__name__}(date={self.date.isoformat()!r})"


def _clean_addresses(addresses: tuple[str | Iterable[str], ...]) -> list[str]:
    if len(addresses) == 1 and not isinstance(addresses[0], str):
        addresses = tuple(addresses[0])
    cleaned = []
    for address in addresses:
        trimmed = strip_line_breaks(address)  # type: ignore[arg-type]
        if not trimmed:
            continue
        cleaned.append(trimmed)
    return cleaned


class MessageBuilder:
    """
    Collects the parts of a message through setters and produces an
    immutable :class:`Message`.

    Every setter replaces what a previous call set, lists included, and
    returns the builder so calls can be chained. The message date is the
    moment the builder was created.

    Example:
        ```python
        message = (
            MessageBuilder()
            .sender("dom@itsallbroken.com")
            .sender_name("Dom")
            .to("one@example.com", "two@example.com")
            .subject("Hello")
            .plain("Hi there")
            .build()
        )
        ```
    """

    def __init__(self, date: datetime | None = None) -> None:
        self._date = date or datetime.now().astimezone()
        self._sender = ""
        self._sender_name = ""
        self._reply_to = ""
        self._subject = ""
        self._to: list[str] = []
        self._cc: list[str] = []
        self._bcc: list[str] = []
        self._write_bcc_header: bool = settings.write_bcc_header
        self._plain: BodyPart | None = None
        self._html: BodyPart | None = None
        self._attachments: list[Attachment] = []

    def to(self, *addresses: str | Iterable[str]) -> MessageBuilder:
        """
        Set the recipient addresses, visible to every recipient.

        Accepts any number of addresses or a single list of them. Line
        breaks are stripped and addresses left empty are dropped.

            builder.to("one@example.com", "two@example.com")
            builder.to(["one@example.com", "two@example.com"])
        """
        self._to = _clean_addresses(addresses)
        return self

    def cc(self, *addresses: str | Iterable[str]) -> MessageBuilder:
        """
        Set the carbon copy addresses, visible to every recipient.
        """
        self._cc = _clean_addresses(addresses)
        return self

    def bcc(self, *addresses: str | Iterable[str]) -> MessageBuilder:
        """
        Set the blind carbon copy addresses.

        They are only written to the message when
        :meth:`write_bcc_header` is enabled.
        """
        self._bcc = _clean_addresses(addresses)
        return self

    def write_bcc_header(self, should_write: bool) -> MessageBuilder:
        """
        Write a `BCC:` header line per blind copy when `True`.

        Email APIs such as Amazon SES read blind copies from the message
        itself. RFC 822 leaves it to each system whether the Bcc field is
        passed on to the other recipients, so an SMTP relay may expose
        them. Defaults to the `write_bcc_header` setting (off).
        """
        self._write_bcc_header = should_write
        return self

    def sender(self, address: str) -> MessageBuilder:
        """
        Set the sender address. Consider also setting :meth:`sender_name`.
        """
        self._sender = strip_line_breaks(address)
        return self

    def sender_name(self, name: str) -> MessageBuilder:
        """
        Set the sender display name, shown by most clients as
        `"Name" <sender@example.com>`. Non-ASCII names are Q-encoded when
        the message is encoded.
        """
        self._sender_name = strip_line_breaks(name)
        return self

    def reply_to(self, address: str) -> MessageBuilder:
        self._reply_to = strip_line_breaks(address)
        return self

    def subject(self, subject: str) -> MessageBuilder:
        """
        Set the subject line. Non-ASCII subjects are Q-encoded when the
        message is encoded.
        """
        self._subject = strip_line_breaks(subject)
        return self

    def plain(self, text: str | None) -> MessageBuilder:
        self._plain = None if text is None else BodyPart(ContentKind.PLAIN, text)
        return self

    def html(self, text: str | None) -> MessageBuilder:
        self._html = None if text is None else BodyPart(ContentKind.HTML, text)
        return self

    def attach(self, filename: str, source: SourceLike) -> MessageBuilder:
        """
        Add `source` as a regular attachment named `filename`.

        `source` is not read until the message is encoded.
        """
        self._attachments.append(Attachment(filename, ByteSource.of(source), inline=False))
        return self

    def attach_inline(self, filename: str, source: SourceLike) -> MessageBuilder:
        """
        Add `source` as an inline attachment, typically an image used in the
        HTML body. Reference it with the `cid` URL scheme:

            <img src="cid:logo.png"/>

        Keeping inline filenames unique is up to the caller.
        """
        self._attachments.append(Attachment(filename, ByteSource.of(source), inline=True))
        return self

    def clear_attachments(self) -> MessageBuilder:
        self._attachments = []
        return self

    def build(self) -> Message:
        return Message(
            sender=self._sender,
            date=self._date,
            sender_name=self._sender_name,
            reply_to=self._reply_to,
            subject=self._subject,
            to=tuple(self._to),
            cc=tuple(self._cc),
            bcc=tuple(self._bcc),
            write_bcc_header=self._write_bcc_header,
            plain=self._plain,
            html=self._html,
            attachments=tuple(self._attachments),
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(date={self._date.isoformat()!r})"
