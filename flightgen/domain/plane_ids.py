"""Plane identifier allocation over the ``AA00``..``ZZ99`` space.

Identifiers are two uppercase letters followed by two digits. They are treated
as a mixed-radix counter (26, 26, 100) so that every identifier maps to a
single integer index and back.
"""

from __future__ import annotations

import re
import string

from flightgen.errors import ConfigurationError, RangeExceeded

_LETTERS = string.ascii_uppercase
_LETTER_RADIX = len(_LETTERS)
_NUMBER_RADIX = 100

ID_SPACE_SIZE = _LETTER_RADIX * _LETTER_RADIX * _NUMBER_RADIX

_IDENTIFIER_RE = re.compile(r"^[A-Z]{2}[0-9]{2}$")


def is_valid_identifier(value: str) -> bool:
    return isinstance(value, str) and _IDENTIFIER_RE.match(value) is not None


def decode(identifier: str) -> int:
    """Return the index of ``identifier`` in the identifier space."""

    if not is_valid_identifier(identifier):
        raise ConfigurationError(
            f"Invalid plane identifier {identifier!r}; expected two letters A-Z "
            "followed by two digits (e.g. AA00)"
        )

    first = _LETTERS.index(identifier[0])
    second = _LETTERS.index(identifier[1])
    number = int(identifier[2:])
    return (first * _LETTER_RADIX + second) * _NUMBER_RADIX + number


def encode(index: int) -> str:
    """Return the identifier at ``index``."""

    if index < 0 or index >= ID_SPACE_SIZE:
        raise RangeExceeded(
            f"Plane index {index} is outside the identifier space (0..{ID_SPACE_SIZE - 1})"
        )

    letters, number = divmod(index, _NUMBER_RADIX)
    first, second = divmod(letters, _LETTER_RADIX)
    return f"{_LETTERS[first]}{_LETTERS[second]}{number:02d}"


def identifier_at(start: str, offset: int) -> str:
    """Return the identifier ``offset`` positions after ``start``.

    Raises ``RangeExceeded`` instead of wrapping past ``ZZ99``.
    """

    if offset < 0:
        raise ConfigurationError(f"Plane offset must be non-negative, got {offset}")

    index = decode(start) + offset
    if index >= ID_SPACE_SIZE:
        raise RangeExceeded(
            f"Plane identifier {start} + {offset} runs past ZZ99 "
            f"({ID_SPACE_SIZE - decode(start)} identifiers available from {start})"
        )
    return encode(index)


def allocate_identifiers(start: str, count: int) -> list[str]:
    """Assign ``count`` consecutive identifiers beginning at ``start``."""

    if count <= 0:
        return []
    # Checking the last one first surfaces overflow before anything is built.
    identifier_at(start, count - 1)
    base = decode(start)
    return [encode(base + offset) for offset in range(count)]


__all__ = [
    "ID_SPACE_SIZE",
    "allocate_identifiers",
    "decode",
    "encode",
    "identifier_at",
    "is_valid_identifier",
]
