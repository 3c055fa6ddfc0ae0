"""Secondary and primary directory blocks (SDB / PDB).

SDB (one block):
    0x00  forward pointer to the next SDB (0 = none)
    0x10  up to 15 entries of 16 bytes:
          +0x00 user number (2)  +0x02 catalogue (8)  +0x0A PDB block (4)
          +0x0E access / valid flag (1)  +0x0F reserved (1)

PDB (two blocks):
    0x00  user number (2), catalogue (8), reserved
    0x10  up to 20 entries of 24 bytes:
          +0x00 name (8)  +0x08 extension (4)  +0x0C start block (4)
          +0x10 end block, inclusive (4)  +0x14 file type (1)  +0x15 reserved
"""

from __future__ import annotations

from exormacs_dump.domain.entities import (
    CatalogueEntry,
    DirectoryEntry,
    FileLocation,
    TableHeader,
)
from exormacs_dump.domain.enums import LocationKind
from exormacs_dump.domain.exceptions import DecodeError

from .fields import TableLayout, be32, fixed, require

SDB = TableLayout(header_size=0x10, entry_size=0x10, capacity=15)
PDB = TableLayout(header_size=0x10, entry_size=0x18, capacity=20)

SDB_VALID_OFFSET = 0x0E


def decode_sdb_header(data: bytes, block: int) -> TableHeader:
    require(data, SDB.header_size, f"secondary directory header at block {block}")
    return TableHeader(
        block=block,
        label="",
        next_block=be32(data, 0x00),
        raw=bytes(data[: SDB.header_size]),
    )


def decode_sdb_entry(index: int, raw: bytes) -> CatalogueEntry:
    require(raw, SDB.entry_size, f"secondary directory entry {index}")
    return CatalogueEntry(index=index, name=fixed(raw, 0x02, 8), pointer=be32(raw, 0x0A), raw=raw)


def sdb_catalogue_empty(raw: bytes) -> bool:
    return raw[0x02] == 0


def decode_pdb_header(data: bytes, block: int) -> TableHeader:
    require(data, PDB.header_size, f"primary directory header at block {block}")
    return TableHeader(
        block=block,
        label=fixed(data, 0x02, 8).trimmed(),
        next_block=0,
        raw=bytes(data[: PDB.header_size]),
    )


def decode_pdb_entry(index: int, raw: bytes) -> DirectoryEntry:
    require(raw, PDB.entry_size, f"primary directory entry {index}")
    start = be32(raw, 0x0C)
    end = be32(raw, 0x10)
    if end < start:
        raise DecodeError(
            f"primary directory entry {index}: end block {end} precedes start block {start}"
        )
    return DirectoryEntry(
        index=index,
        stem=fixed(raw, 0x00, 8),
        extension=fixed(raw, 0x08, 4),
        file_type=raw[0x14],
        location=FileLocation(
            kind=LocationKind.CONTIGUOUS,
            start_block=start,
            block_count=end - start + 1,
        ),
        raw=raw,
    )
