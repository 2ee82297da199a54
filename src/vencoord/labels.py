"""Label codec: grid (column, row) to short printable labels and back.

Each axis is encoded on its own and the two segments are concatenated,
column first. A segment is one letter carrying ``value % 52``
(a-z = 0-25, A-Z = 26-51), prefixed by ``value // 52`` in decimal when
the value is 52 or more:

    0 -> "a"    25 -> "z"    26 -> "A"    51 -> "Z"    52 -> "1a"

So encode(3, 1) == "db" and encode(52, 0) == "1aa".

Decoding is greedy and stops after the second letter; anything typed
after a complete label is ignored.
"""

from __future__ import annotations

from collections.abc import Iterator

RADIX = 52
AXIS_MAX = 2**32 - 1

_LOWER = "abcdefghijklmnopqrstuvwxyz"
_UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_ALPHABET = _LOWER + _UPPER
_DIGIT_OF = {ch: i for i, ch in enumerate(_ALPHABET)}
_DECIMAL = frozenset("0123456789")
_PREFIX_MAX_DIGITS = len(str(AXIS_MAX))


def encode_axis(value: int) -> str:
    """Encode a single axis value into its label segment."""
    if value < 0 or value > AXIS_MAX:
        raise ValueError(f"Axis value {value} out of range (0-{AXIS_MAX})")
    letter = _ALPHABET[value % RADIX]
    if value < RADIX:
        return letter
    return f"{value // RADIX}{letter}"


def encode(x: int, y: int) -> str:
    """Encode a (column, row) grid index as a label."""
    return encode_axis(x) + encode_axis(y)


def _decode_axis(s: str, pos: int) -> tuple[int, int] | None:
    """Decode one segment starting at pos. Returns (value, next_pos)."""
    end = pos
    while end < len(s) and s[end] in _DECIMAL:
        end += 1
    # Leading zeros are accepted; anything wider than u32 is an overflow.
    digits = s[pos:end].lstrip("0")
    if len(digits) > _PREFIX_MAX_DIGITS:
        return None
    prefix = int(digits) if digits else 0

    if end >= len(s):
        return None
    digit = _DIGIT_OF.get(s[end])
    if digit is None:
        return None

    value = prefix * RADIX + digit
    if value > AXIS_MAX:
        return None
    return value, end + 1


def decode(s: str) -> tuple[int, int] | None:
    """Decode a label back to (column, row).

    Returns None if no complete two-segment label is found at the start
    of the string. Trailing characters are ignored.
    """
    first = _decode_axis(s, 0)
    if first is None:
        return None
    x, pos = first

    second = _decode_axis(s, pos)
    if second is None:
        return None
    y, _ = second
    return x, y


def iter_labels(columns: int, rows: int) -> Iterator[tuple[int, int, str]]:
    """Yield (column, row, label) for every cell, column by column."""
    for col in range(columns):
        for row in range(rows):
            yield col, row, encode(col, row)
