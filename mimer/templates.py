from __future__ import annotations

import re
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape


def _html_to_text_simple(html: str) -> str:
    """
    Convert a block of HTML into a minimal plain-text fallback.

    - `<br>` tags are converted into line breaks.
    - `</p>` tags are converted into paragraph breaks.
    - All other HTML tags are stripped.
    - Whitespace around line breaks is collapsed.
    """
    html = re.sub(r"<\s*br\s*/?>", "\n", html, flags=re.I)
    html = re.sub(r"</\s*p\s*>", "\n\n", html, flags=re.I)

    text = re.sub(r"<[^>]+>", "", html)

    text = re.sub(r"[ \t]+\n", "\n", text)
    text = re.sub(r"\n[ \t]+", "\n", text)

    return text.strip()


class TemplateRenderer:
    """
    A thin wrapper around Jinja2 rendering the body parts of a message.

    Example:
        ```python
        renderer = TemplateRenderer("templates/emails")
        text, html = renderer.render_pair("welcome.html", {"user": "John"})
        builder.plain(text).html(html)
        ```
    """

    def __init__(self, template_dir: str) -> None:
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
            enable_async=False,
        )

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        return self.env.get_template(template_name).render(**context)

    def render_pair(
        self,
        template_html: str,
        context: dict[str, Any],
        template_text: str | None = None,
    ) -> tuple[str, str]:
        """
        Render the plain-text and HTML bodies of a message.

        Without a text template the plain body is derived from the
        rendered HTML.

        Returns:
            A `(text, html)` tuple.
        """
        html = self.render(template_html, context)
        if template_text:
            text = self.render(template_text, context)
        else:
            text = _html_to_text_simple(html)
        return text, html
