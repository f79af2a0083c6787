from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from mimer.backends.base import BaseMailBackend
from mimer.exceptions import BackendNotConfigured, InvalidMessage
from mimer.message import Message, MessageBuilder
from mimer.templates import TemplateRenderer


class Mailer:
    """
    Validates messages and hands them to a backend.

    Example:
        ```python
        mailer = Mailer(backend=FileBackend("outbox"), template_dir="templates/emails")

        message = (
            MessageBuilder()
            .sender("noreply@example.com")
            .to("user@example.com")
            .subject("Welcome")
            .plain("Hello!")
            .build()
        )
        await mailer.send(message)
        ```
    """

    def __init__(
        self, backend: BaseMailBackend | None = None, template_dir: str | None = None
    ) -> None:
        self.backend = backend
        self.templates = TemplateRenderer(template_dir) if template_dir else None

    async def open(self) -> None:
        """
        Open the backend.

        Raises:
            BackendNotConfigured: If no backend is configured.
        """
        if not self.backend:
            raise BackendNotConfigured("No mail backend configured.")
        await self.backend.open()

    async def close(self) -> None:
        if self.backend:
            await self.backend.close()

    def validate(self, message: Message) -> None:
        """
        Raises:
            InvalidMessage: If the message has no sender or no recipient.
        """
        if not message.sender:
            raise InvalidMessage("No sender address specified.")
        if not message.all_recipients():
            raise InvalidMessage("No recipients specified.")

    async def send(self, message: Message) -> None:
        """
        Validate and send a single message.

        Raises:
            BackendNotConfigured: If no backend is configured.
            InvalidMessage: If the message has no sender or no recipient.
        """
        if not self.backend:
            raise BackendNotConfigured("No mail backend configured.")
        self.validate(message)
        await self.backend.send(message)

    async def send_many(self, messages: Sequence[Message]) -> None:
        if not self.backend:
            raise BackendNotConfigured("No mail backend configured.")
        for message in messages:
            self.validate(message)
        await self.backend.send_many(messages)

    async def send_template(
        self,
        builder: MessageBuilder,
        *,
        template_html: str,
        context: dict[str, Any],
        template_text: str | None = None,
    ) -> Message:
        """
        Render the body parts of `builder` from Jinja2 templates, then build
        and send the message.

        If no plain-text template is provided, a fallback is generated from
        the rendered HTML.

        Raises:
            BackendNotConfigured: If no template renderer is configured.
        """
        if not self.templates:
            raise BackendNotConfigured("No template renderer configured.")

        text_body, html_body = self.templates.render_pair(
            template_html, context, template_text=template_text
        )
        message = builder.plain(text_body).html(html_body).build()
        await self.send(message)
        return message
