from __future__ import annotations

from typing import Union

from typing_extensions import Doc as Doc

BytesLike = Union[bytes, bytearray, memoryview]
