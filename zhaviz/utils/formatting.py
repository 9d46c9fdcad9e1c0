"""Numeric parsing and formatting helpers for ZHA payload fields."""

from __future__ import annotations

import math
import re

_LEADING_DEC = re.compile(r"^\s*([+-]?\d+)")
_LEADING_HEX = re.compile(r"^\s*([+-]?)(?:0[xX])?([0-9a-fA-F]+)")


def parse_leading_int(value: object, base: int = 10) -> float:
    """Parse the leading integer of ``value``; NaN when there is none.

    Mirrors the lenient integer parsing browsers apply to ZHA payloads:
    ``"200"`` and ``"200 & 150"`` both give 200, ``"n/a"`` gives NaN.
    Returned as a float so that NaN can flow through comparisons.
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, int):
        return float(value)
    if isinstance(value, float):
        return value if math.isnan(value) else float(math.trunc(value))
    if not isinstance(value, str):
        return math.nan

    if base == 16:
        match = _LEADING_HEX.match(value)
        if not match:
            return math.nan
        sign, digits = match.groups()
        number = int(digits, 16)
        return float(-number if sign == "-" else number)

    match = _LEADING_DEC.match(value)
    if not match:
        return math.nan
    return float(int(match.group(1)))


def format_as_padded_hex(value: int | str) -> str | None:
    """Render a network address as ``0x`` plus at least four hex digits.

    String input is read as hex. Returns None for anything that is not a
    non-negative address.
    """
    base = 16 if isinstance(value, str) else 10
    number = parse_leading_int(value, base=base)
    if math.isnan(number) or number < 0:
        return None
    return "0x" + format(int(number), "04x")
