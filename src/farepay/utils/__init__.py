"""Utility functions for farepay."""

from farepay.utils.date_parser import parse_timestamp
from farepay.utils.amount_parser import parse_amount
from farepay.utils.uid_normalizer import (
    normalize_hex,
    strip_trailing_zeros,
    reverse_byte_order,
    first_n_bytes,
)

__all__ = [
    "parse_timestamp",
    "parse_amount",
    "normalize_hex",
    "strip_trailing_zeros",
    "reverse_byte_order",
    "first_n_bytes",
]
