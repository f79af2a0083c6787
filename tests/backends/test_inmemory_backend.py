import email
from email.policy import default as default_policy

import pytest

from mimer.backends.inmemory import InMemoryBackend

pytestmark = pytest.mark.anyio


async def test_outbox_keeps_message_and_encoded_bytes(builder):
    backend = InMemoryBackend()
    message = builder.plain("hi").build()

    await backend.send(message)

    assert len(backend.outbox) == 1
    sent = backend.outbox[0]
    assert sent.message is message
    assert b"Subject: Test\r\n" in sent.raw
    parsed = email.message_from_bytes(sent.raw, policy=default_policy)
    assert parsed.get_body(("plain",)).get_content() == "hi"


async def test_send_many_keeps_order(builder):
    backend = InMemoryBackend()
    messages = [builder.subject("one").build(), builder.subject("two").build()]

    await backend.send_many(messages)

    assert [sent.message.subject for sent in backend.outbox] == ["one", "two"]


async def test_open_and_close_are_noops():
    backend = InMemoryBackend()

    await backend.open()
    await backend.close()

    assert backend.outbox == []
