"""Text encodings at the edge of the core.

Private keys cross the boundary as hexadecimal text; persisted shares are
stored as ``"<x>||<y>"`` with both halves in decimal.
"""

from __future__ import annotations

import string

from shamirvault.config import SECRET_HEX_WIDTH, SHARE_SEPARATOR
from shamirvault.crypto.shamir import Share
from shamirvault.errors import InvalidParameters, ParseError

_HEX_DIGITS = frozenset(string.hexdigits)


def parse_secret_hex(text: str) -> int:
    """Parse a hex private key (optional ``0x`` prefix) into an integer."""
    digits = text.strip()
    if digits[:2].lower() == "0x":
        digits = digits[2:]
    if not digits or not set(digits) <= _HEX_DIGITS:
        raise ParseError(f"Not a hexadecimal secret: {text!r}", text)
    return int(digits, 16)


def format_secret_hex(value: int, width: int = SECRET_HEX_WIDTH) -> str:
    """Render *value* as lower-case hex, zero-padded to *width* digits."""
    if value < 0:
        raise InvalidParameters("Secret must be non-negative")
    return format(value, f"0{width}x")


def _parse_decimal(part: str, text: str) -> int:
    body = part[1:] if part[:1] == "-" else part
    if not body.isdecimal():
        raise ParseError(f"Malformed share: {text!r}", text)
    return int(part)


def encode_share(share: Share) -> str:
    x, y = share
    return f"{x}{SHARE_SEPARATOR}{y}"


def decode_share(text: str) -> Share:
    """Parse ``"<x>||<y>"`` back into a ``Share``."""
    parts = text.strip().split(SHARE_SEPARATOR)
    if len(parts) != 2:
        raise ParseError(f"Malformed share: {text!r}", text)
    x, y = (_parse_decimal(p.strip(), text) for p in parts)
    return Share(x, y)
