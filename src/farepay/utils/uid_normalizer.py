"""Canonical forms for card UIDs reported by NFC readers.

Readers disagree on how they print a UID: some separate bytes with colons
or spaces, some use lower case, some zero-pad, some emit the bytes in
reverse order. Every function here is total over string input and never
raises.
"""

import re
from typing import Optional

_NON_HEX = re.compile(r"[^0-9A-Fa-f]")

# 4-byte UID prefix expressed in hex characters
FOUR_BYTE_PREFIX = 8


def normalize_hex(raw: str) -> str:
    """Strip every non-hex character and uppercase the rest.

    Examples:
        "25:0e:8b:1b:08" -> "250E8B1B08"
        "  " -> ""
    """
    if not raw:
        return ""
    return _NON_HEX.sub("", raw).upper()


def strip_trailing_zeros(normalized: str) -> str:
    """Remove zero padding from the end of a normalized UID.

    Returns the input unchanged if stripping would leave nothing, so a
    non-empty value never becomes empty.
    """
    stripped = normalized.rstrip("0")
    return stripped or normalized


def reverse_byte_order(hex_uid: str) -> Optional[str]:
    """Reverse the order of 2-character byte pairs.

    "AABBCC" becomes "CCBBAA". An odd trailing nibble is kept as its own
    chunk. Returns None when there are fewer than 2 characters.
    """
    if len(hex_uid) < 2:
        return None
    pairs = [hex_uid[i : i + 2] for i in range(0, len(hex_uid), 2)]
    return "".join(reversed(pairs))


def first_n_bytes(hex_uid: str, n_hex_chars: int = FOUR_BYTE_PREFIX) -> str:
    """Return the first ``n_hex_chars`` characters of a hex UID."""
    return hex_uid[:n_hex_chars]
