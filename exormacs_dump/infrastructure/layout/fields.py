"""Field extraction helpers shared by the on-disk struct decoders.

Every decoder works on an owned byte slice with explicit offsets and widths;
all multi-byte integers are big-endian.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Callable, Iterator

from exormacs_dump.domain.exceptions import TruncatedRecordError
from exormacs_dump.domain.value_objects import FixedName
from exormacs_dump.infrastructure.block_reader import BLOCK_SIZE


@dataclass(frozen=True)
class TableLayout:
    """Physical shape of a fixed-capacity directory table."""

    header_size: int
    entry_size: int
    capacity: int

    @property
    def size(self) -> int:
        return self.header_size + self.entry_size * self.capacity

    @property
    def blocks(self) -> int:
        return -(-self.size // BLOCK_SIZE)


def require(data: bytes, size: int, what: str) -> None:
    if len(data) < size:
        raise TruncatedRecordError(f"{what}: need {size} bytes, got {len(data)}")


def be16(data: bytes, offset: int) -> int:
    return struct.unpack_from(">H", data, offset)[0]


def be32(data: bytes, offset: int) -> int:
    return struct.unpack_from(">I", data, offset)[0]


def fixed(data: bytes, offset: int, width: int) -> FixedName:
    return FixedName(bytes(data[offset : offset + width]))


def first_byte_zero(raw: bytes) -> bool:
    return raw[0] == 0


def iter_records(
    data: bytes,
    table: TableLayout,
    is_empty: Callable[[bytes], bool],
) -> Iterator[tuple[int, bytes]]:
    """Yield (index, raw record) up to the first empty sentinel or the table capacity.

    Raises TruncatedRecordError when a record runs past the end of ``data``.
    """
    for index in range(table.capacity):
        offset = table.header_size + index * table.entry_size
        raw = bytes(data[offset : offset + table.entry_size])
        if len(raw) < table.entry_size:
            raise TruncatedRecordError(
                f"record {index} at offset {offset:#x} is truncated "
                f"({len(raw)} of {table.entry_size} bytes)"
            )
        if is_empty(raw):
            return
        yield index, raw
