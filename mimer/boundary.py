from __future__ import annotations

import secrets

from mimer.exceptions import EntropyError

BOUNDARY_BYTES = 30


def generate_boundary() -> str:
    """
    Return a fresh MIME boundary: 30 random bytes from the operating system
    CSPRNG rendered as 60 lowercase hexadecimal characters.

    Raises:
        EntropyError: If the random source is unavailable.
    """
    try:
        return secrets.token_hex(BOUNDARY_BYTES)
    except (OSError, NotImplementedError) as exc:
        raise EntropyError("Unable to read random bytes for a MIME boundary.") from exc
