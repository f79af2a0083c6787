import pytest
from jinja2.exceptions import TemplateNotFound

from mimer.templates import TemplateRenderer, _html_to_text_simple


def test_render_html_and_text(tmp_path):
    (tmp_path / "welcome.html").write_text("<p>Hello {{ name }}</p>")
    renderer = TemplateRenderer(str(tmp_path))

    assert renderer.render("welcome.html", {"name": "John"}) == "<p>Hello John</p>"

    text, html = renderer.render_pair("welcome.html", {"name": "Jane"})

    assert text == "Hello Jane"
    assert html == "<p>Hello Jane</p>"


def test_html_templates_are_autoescaped(tmp_path):
    (tmp_path / "welcome.html").write_text("<p>{{ name }}</p>")
    renderer = TemplateRenderer(str(tmp_path))

    assert renderer.render("welcome.html", {"name": "<b>x</b>"}) == "<p>&lt;b&gt;x&lt;/b&gt;</p>"


def test_html_to_text_simple_handles_breaks_and_paragraphs():
    text = _html_to_text_simple("<p>Hello<br>World</p><p>Again</p>")

    assert text == "Hello\nWorld\n\nAgain"


def test_render_invalid_template_raises(tmp_path):
    renderer = TemplateRenderer(str(tmp_path))

    with pytest.raises(TemplateNotFound):
        renderer.render("nonexistent.html", {})
