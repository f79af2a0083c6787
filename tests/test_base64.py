import base64
import io

import pytest

from mimer._internal._base64 import Base64LineWriter


@pytest.mark.parametrize("size", [0, 1, 56, 57, 58, 114, 1000])
def test_output_matches_reference_encoding(size):
    data = bytes(range(256)) * 4
    data = data[:size]
    sink = io.BytesIO()

    writer = Base64LineWriter(sink)
    for start in range(0, len(data), 7):
        writer.write(data[start : start + 7])
    writer.close()

    expected = base64.encodebytes(data).replace(b"\n", b"\r\n")
    assert sink.getvalue() == expected


def test_invalid_line_length():
    with pytest.raises(ValueError):
        Base64LineWriter(io.BytesIO(), line_length=75)


def test_close_is_idempotent():
    sink = io.BytesIO()
    writer = Base64LineWriter(sink)
    writer.write(b"abc")
    writer.close()
    writer.close()

    assert sink.getvalue() == b"YWJj\r\n"
