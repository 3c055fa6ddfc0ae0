"""Set table / file table generation.

Set table (one block): 16-byte reserved header, then up to 15 entries of
16 bytes: catalogue name (8), file-table block (4), reserved (4).

File table (two blocks): 16-byte header starting with the catalogue name (8),
then up to 20 entries of 24 bytes: name (8), extension (3), file type (1),
start block (4), block count minus one (4), reserved (4).
"""

from __future__ import annotations

from exormacs_dump.domain.entities import (
    CatalogueEntry,
    DirectoryEntry,
    FileLocation,
    TableHeader,
)
from exormacs_dump.domain.enums import LocationKind

from .fields import TableLayout, be32, fixed, require

SET_TABLE = TableLayout(header_size=0x10, entry_size=0x10, capacity=15)
FILE_TABLE = TableLayout(header_size=0x10, entry_size=0x18, capacity=20)


def decode_set_header(data: bytes, block: int) -> TableHeader:
    require(data, SET_TABLE.header_size, f"set table header at block {block}")
    return TableHeader(block=block, label="", next_block=0, raw=bytes(data[: SET_TABLE.header_size]))


def decode_set_entry(index: int, raw: bytes) -> CatalogueEntry:
    require(raw, SET_TABLE.entry_size, f"set table entry {index}")
    return CatalogueEntry(index=index, name=fixed(raw, 0x00, 8), pointer=be32(raw, 0x08), raw=raw)


def decode_file_header(data: bytes, block: int) -> TableHeader:
    require(data, FILE_TABLE.header_size, f"file table header at block {block}")
    return TableHeader(
        block=block,
        label=fixed(data, 0x00, 8).trimmed(),
        next_block=0,
        raw=bytes(data[: FILE_TABLE.header_size]),
    )


def decode_file_entry(index: int, raw: bytes) -> DirectoryEntry:
    require(raw, FILE_TABLE.entry_size, f"file table entry {index}")
    return DirectoryEntry(
        index=index,
        stem=fixed(raw, 0x00, 8),
        extension=fixed(raw, 0x08, 3),
        file_type=raw[0x0B],
        location=FileLocation(
            kind=LocationKind.CONTIGUOUS,
            start_block=be32(raw, 0x0C),
            # stored as count - 1
            block_count=be32(raw, 0x10) + 1,
        ),
        raw=raw,
    )
