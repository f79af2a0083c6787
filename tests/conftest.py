from __future__ import annotations

import pytest

from mimer.message import MessageBuilder
from tests.utils import FIXED_DATE


@pytest.fixture
def builder() -> MessageBuilder:
    return (
        MessageBuilder(date=FIXED_DATE)
        .sender("vit@example.com")
        .to("support@example.com")
        .subject("Test")
    )
