"""Domain entities decoded from a volume image.

All entities are transient read-only views derived from raw block bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .enums import FileType, LocationKind
from .value_objects import FixedName, destination_for, display_name


@dataclass(frozen=True)
class VolumeDescriptor:
    volume: FixedName
    user_number: int
    directory_block: int
    description: FixedName
    signature: bytes
    raw: bytes

    @property
    def name(self) -> str:
        return self.volume.trimmed()


@dataclass(frozen=True)
class TableHeader:
    """Header of a directory table; ``next_block`` is 0 when the format has no chain."""

    block: int
    label: str
    next_block: int
    raw: bytes


@dataclass(frozen=True)
class FileLocation:
    kind: LocationKind
    start_block: int
    block_count: int
    pointer: int = 0  # referenced block for indirect files


@dataclass(frozen=True)
class DirectoryEntry:
    """A file entry of a catalogue table."""

    index: int
    stem: FixedName
    extension: FixedName
    file_type: int
    location: FileLocation
    raw: bytes

    @property
    def display_name(self) -> str:
        return display_name(self.stem, self.extension)

    @property
    def is_supported(self) -> bool:
        return self.file_type == FileType.CONTIGUOUS

    @property
    def annotation(self) -> str:
        return FileType.annotation_for(self.file_type)


@dataclass(frozen=True)
class CatalogueEntry:
    """A top-level entry naming a nested table (or, for indirect files, an index block)."""

    index: int
    name: FixedName
    pointer: int
    raw: bytes


@dataclass(frozen=True)
class Volume:
    descriptor: VolumeDescriptor
    root_block: int


@dataclass(frozen=True)
class Catalogue:
    name: str
    header: TableHeader


@dataclass(frozen=True)
class CatalogueFile:
    catalogue: str
    entry: DirectoryEntry

    @property
    def destination(self) -> str:
        return destination_for(self.catalogue, self.entry.stem, self.entry.extension)


WalkEvent = Union[Volume, Catalogue, CatalogueFile]
