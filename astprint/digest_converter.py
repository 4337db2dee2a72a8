"""
Digest-to-Integer Converter

Reduces a hex digest to a signed 64-bit integer usable as a fast lookup
key.  The digest is read as a big-endian unsigned number and its low 64
bits are reinterpreted as two's complement, which is what Java's
``new BigInteger(hex, 16).longValue()`` yields.  The value is persisted by
downstream tools, so this layout must not change.
"""

import re

_HEX = re.compile(r"[0-9a-fA-F]+")
_MASK_64 = (1 << 64) - 1
_SIGN_BIT = 1 << 63


def to_long(hex_digest: str) -> int:
    """Convert ``hex_digest`` to a signed 64-bit integer."""
    if not hex_digest or not _HEX.fullmatch(hex_digest):
        raise ValueError(f"Not a hex digest: {hex_digest!r}")
    value = int(hex_digest, 16) & _MASK_64
    if value & _SIGN_BIT:
        value -= 1 << 64
    return value
