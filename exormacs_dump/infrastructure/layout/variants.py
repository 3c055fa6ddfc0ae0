"""Format variant dispatch.

Each on-disk generation is described by a VariantLayout: its table shapes,
sentinel tests and decode functions. The variant is always chosen by
configuration; images are never sniffed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from exormacs_dump.domain.entities import CatalogueEntry, DirectoryEntry, TableHeader
from exormacs_dump.domain.enums import FormatVariant

from . import backup, directory, indexed, settable
from .fields import TableLayout, first_byte_zero

HeaderDecoder = Callable[[bytes, int], TableHeader]
EntryDecoder = Callable[[int, bytes], DirectoryEntry]
CatalogueDecoder = Callable[[int, bytes], CatalogueEntry]
Sentinel = Callable[[bytes], bool]


@dataclass(frozen=True)
class VariantLayout:
    variant: FormatVariant
    root_table: TableLayout
    decode_root_header: HeaderDecoder
    is_root_empty: Sentinel
    # None: the root table is found through the volume descriptor
    fixed_root_block: int | None = None
    # Single-level formats list files in the root table
    decode_root_file: EntryDecoder | None = None
    # Two-level formats list catalogues in the root table
    decode_catalogue: CatalogueDecoder | None = None
    file_table: TableLayout | None = None
    decode_file_header: HeaderDecoder | None = None
    is_file_empty: Sentinel = first_byte_zero
    decode_file_entry: EntryDecoder | None = None
    is_indirect: Callable[[CatalogueEntry], bool] | None = None
    decode_index_block: Callable[[CatalogueEntry, bytes], DirectoryEntry] | None = None

    @property
    def nested(self) -> bool:
        return self.decode_catalogue is not None


_LAYOUTS: dict[FormatVariant, VariantLayout] = {
    FormatVariant.BACKUP: VariantLayout(
        variant=FormatVariant.BACKUP,
        root_table=backup.DIRECTORY,
        decode_root_header=backup.decode_header,
        is_root_empty=first_byte_zero,
        fixed_root_block=backup.DIRECTORY_BLOCK,
        decode_root_file=backup.decode_file_entry,
    ),
    FormatVariant.SET_TABLE: VariantLayout(
        variant=FormatVariant.SET_TABLE,
        root_table=settable.SET_TABLE,
        decode_root_header=settable.decode_set_header,
        is_root_empty=first_byte_zero,
        decode_catalogue=settable.decode_set_entry,
        file_table=settable.FILE_TABLE,
        decode_file_header=settable.decode_file_header,
        decode_file_entry=settable.decode_file_entry,
    ),
    FormatVariant.EXORMACS: VariantLayout(
        variant=FormatVariant.EXORMACS,
        root_table=directory.SDB,
        decode_root_header=directory.decode_sdb_header,
        is_root_empty=directory.sdb_catalogue_empty,
        decode_catalogue=directory.decode_sdb_entry,
        file_table=directory.PDB,
        decode_file_header=directory.decode_pdb_header,
        decode_file_entry=directory.decode_pdb_entry,
    ),
    FormatVariant.INDEXED: VariantLayout(
        variant=FormatVariant.INDEXED,
        root_table=directory.SDB,
        decode_root_header=directory.decode_sdb_header,
        is_root_empty=indexed.sdb_entry_invalid,
        decode_catalogue=directory.decode_sdb_entry,
        file_table=directory.PDB,
        decode_file_header=directory.decode_pdb_header,
        decode_file_entry=directory.decode_pdb_entry,
        is_indirect=indexed.is_indirect,
        decode_index_block=indexed.decode_index_block,
    ),
}


def get_layout(variant: FormatVariant) -> VariantLayout:
    return _LAYOUTS[variant]
