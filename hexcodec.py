"""Hex text <-> bytes for the line-oriented front end.

The digest core only ever sees raw bytes; everything here happens before
a message is hashed or after its digest is computed.
"""

from __future__ import annotations

import re
from typing import Union


_HEX_RE = re.compile(r"[0-9a-fA-F]*")


class InvalidEncoding(ValueError):
    """Raised when an input line is not a valid hex-encoded byte string."""

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"invalid hex input ({reason}): {text!r}")


def decode_hex(line: Union[str, bytes]) -> bytes:
    """Decode one hex-encoded line into raw bytes.

    `line` may be text or the raw bytes read from a file. Surrounding
    whitespace, including the line terminator, is ignored. Upper and lower
    case digits are both accepted; an empty line decodes to the empty
    message.
    """
    if isinstance(line, (bytes, bytearray)):
        try:
            text = bytes(line).decode("ascii", errors="strict")
        except UnicodeDecodeError:
            raise InvalidEncoding(
                bytes(line).decode("ascii", errors="backslashreplace").strip(),
                "non-hex character",
            ) from None
    else:
        text = line

    stripped = text.strip()
    if not _HEX_RE.fullmatch(stripped):
        raise InvalidEncoding(stripped, "non-hex character")
    if len(stripped) % 2:
        raise InvalidEncoding(stripped, "odd number of hex digits")
    return bytes.fromhex(stripped)


def encode_hex(data: bytes) -> str:
    return data.hex()
