import pytest

from mimer.backends.inmemory import InMemoryBackend
from mimer.exceptions import BackendNotConfigured, InvalidMessage
from mimer.mailer import Mailer
from mimer.message import MessageBuilder
from tests.utils import FIXED_DATE

pytestmark = pytest.mark.anyio


async def test_send_requires_backend(builder):
    mailer = Mailer()

    with pytest.raises(BackendNotConfigured):
        await mailer.send(builder.build())


async def test_open_requires_backend():
    with pytest.raises(BackendNotConfigured):
        await Mailer().open()


async def test_send_inmemory_backend(builder):
    backend = InMemoryBackend()
    mailer = Mailer(backend=backend)

    await mailer.send(builder.plain("hi").build())

    assert len(backend.outbox) == 1
    assert backend.outbox[0].message.plain.text == "hi"


async def test_send_many(builder):
    backend = InMemoryBackend()
    mailer = Mailer(backend=backend)

    await mailer.send_many([builder.subject("one").build(), builder.subject("two").build()])

    assert len(backend.outbox) == 2


async def test_send_many_validates_before_sending(builder):
    backend = InMemoryBackend()
    mailer = Mailer(backend=backend)
    invalid = MessageBuilder(date=FIXED_DATE).sender("vit@example.com").build()

    with pytest.raises(InvalidMessage):
        await mailer.send_many([builder.build(), invalid])

    assert backend.outbox == []


async def test_invalid_message_without_recipients():
    mailer = Mailer(backend=InMemoryBackend())
    message = MessageBuilder(date=FIXED_DATE).sender("vit@example.com").build()

    with pytest.raises(InvalidMessage):
        await mailer.send(message)


async def test_bcc_only_counts_as_recipient():
    backend = InMemoryBackend()
    mailer = Mailer(backend=backend)
    message = (
        MessageBuilder(date=FIXED_DATE).sender("vit@example.com").bcc("hidden@example.com").build()
    )

    await mailer.send(message)

    assert b"hidden@example.com" not in backend.outbox[0].raw


async def test_invalid_message_without_sender():
    mailer = Mailer(backend=InMemoryBackend())
    message = MessageBuilder(date=FIXED_DATE).to("support@example.com").build()

    with pytest.raises(InvalidMessage):
        await mailer.send(message)


async def test_open_close_idempotent():
    mailer = Mailer(backend=InMemoryBackend())

    await mailer.open()
    await mailer.open()
    await mailer.close()
    await mailer.close()


async def test_send_template_html_and_text(tmp_path, builder):
    (tmp_path / "welcome.html").write_text("<h1>Hello {{ name }}</h1>")
    (tmp_path / "welcome.txt").write_text("Hello {{ name }}")
    backend = InMemoryBackend()
    mailer = Mailer(backend=backend, template_dir=str(tmp_path))

    message = await mailer.send_template(
        builder,
        template_html="welcome.html",
        template_text="welcome.txt",
        context={"name": "Alice"},
    )

    assert message.html.text == "<h1>Hello Alice</h1>"
    assert message.plain.text == "Hello Alice"
    assert backend.outbox[0].message is message


async def test_send_template_derives_plain_text(tmp_path, builder):
    (tmp_path / "welcome.html").write_text("<p>Hello<br>{{ name }}</p>")
    mailer = Mailer(backend=InMemoryBackend(), template_dir=str(tmp_path))

    message = await mailer.send_template(
        builder, template_html="welcome.html", context={"name": "Bob"}
    )

    assert message.plain.text == "Hello\nBob"


async def test_send_template_requires_templates(builder):
    mailer = Mailer(backend=InMemoryBackend())

    with pytest.raises(BackendNotConfigured):
        await mailer.send_template(builder, template_html="welcome.html", context={})
