"""Newest generation: SDB entries with a valid marker and indirect files.

An SDB entry whose catalogue name is blank points at an index block instead
of a PDB:

    0x00  name (8)  0x08 extension (4)  0x0C file type (1)
    0x10  data block pointer (4)

The file consists of the index block followed by the referenced block.
"""

from __future__ import annotations

from exormacs_dump.domain.entities import CatalogueEntry, DirectoryEntry, FileLocation
from exormacs_dump.domain.enums import LocationKind

from .directory import SDB_VALID_OFFSET
from .fields import be32, fixed, require

INDEX_BLOCK_SIZE = 0x14
DATA_POINTER_OFFSET = 0x10


def sdb_entry_invalid(raw: bytes) -> bool:
    return raw[SDB_VALID_OFFSET] == 0


def is_indirect(entry: CatalogueEntry) -> bool:
    # Unverified: a blank catalogue name is taken to mean an index-file entry.
    # Confirm against real media before relying on it.
    return entry.name.is_blank()


def decode_index_block(entry: CatalogueEntry, data: bytes) -> DirectoryEntry:
    require(data, INDEX_BLOCK_SIZE, f"index block {entry.pointer}")
    return DirectoryEntry(
        index=entry.index,
        stem=fixed(data, 0x00, 8),
        extension=fixed(data, 0x08, 4),
        file_type=data[0x0C],
        location=FileLocation(
            kind=LocationKind.INDIRECT,
            start_block=entry.pointer,
            block_count=2,
            pointer=be32(data, DATA_POINTER_OFFSET),
        ),
        raw=bytes(data[:INDEX_BLOCK_SIZE]),
    )
