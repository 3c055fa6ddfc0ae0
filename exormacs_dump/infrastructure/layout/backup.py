"""Backup set directory: the oldest, single-level generation.

The directory lives at a fixed block and lists up to 50 contiguous files:

    0x00  6   unknown
    0x06  10  label
    0x10      entries, 50 bytes each:
              +0x00 name (8)  +0x08 extension (4)
              +0x0C first block  +0x10 block count  +0x14 opaque
"""

from __future__ import annotations

from exormacs_dump.domain.entities import DirectoryEntry, FileLocation, TableHeader
from exormacs_dump.domain.enums import FileType, LocationKind

from .fields import TableLayout, be32, fixed, require

DIRECTORY_BLOCK = 3
DIRECTORY = TableLayout(header_size=0x10, entry_size=0x32, capacity=50)


def decode_header(data: bytes, block: int) -> TableHeader:
    require(data, DIRECTORY.header_size, f"backup directory header at block {block}")
    return TableHeader(
        block=block,
        label=fixed(data, 0x06, 10).trimmed(),
        next_block=0,
        raw=bytes(data[: DIRECTORY.header_size]),
    )


def decode_file_entry(index: int, raw: bytes) -> DirectoryEntry:
    require(raw, DIRECTORY.entry_size, f"backup directory entry {index}")
    return DirectoryEntry(
        index=index,
        stem=fixed(raw, 0x00, 8),
        extension=fixed(raw, 0x08, 4),
        file_type=FileType.CONTIGUOUS,
        location=FileLocation(
            kind=LocationKind.CONTIGUOUS,
            start_block=be32(raw, 0x0C),
            block_count=be32(raw, 0x10),
        ),
        raw=raw,
    )
