"""Domain primitives for simulated planes."""

from .plane_ids import (
    ID_SPACE_SIZE,
    allocate_identifiers,
    decode,
    encode,
    identifier_at,
    is_valid_identifier,
)

__all__ = [
    "ID_SPACE_SIZE",
    "allocate_identifiers",
    "decode",
    "encode",
    "identifier_at",
    "is_valid_identifier",
]
