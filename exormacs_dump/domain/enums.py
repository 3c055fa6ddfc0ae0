"""Format variant and file type enumerations."""

from __future__ import annotations

from enum import Enum, IntEnum


class FormatVariant(Enum):
    BACKUP = "backup"
    SET_TABLE = "settable"
    EXORMACS = "exormacs"
    INDEXED = "indexed"

    @classmethod
    def from_string(cls, value: str) -> FormatVariant | None:
        return _VARIANT_MAPPING.get(value.strip().lower())


_VARIANT_MAPPING: dict[str, FormatVariant] = {
    "backup": FormatVariant.BACKUP,
    "settable": FormatVariant.SET_TABLE,
    "set-table": FormatVariant.SET_TABLE,
    "exormacs": FormatVariant.EXORMACS,
    "versados": FormatVariant.EXORMACS,
    "indexed": FormatVariant.INDEXED,
}


class FileType(IntEnum):
    CONTIGUOUS = 0
    SEQUENTIAL = 1
    ISAM = 2
    ISAM_DUPLICATES = 3
    INDEXED = 4

    @classmethod
    def annotation_for(cls, code: int) -> str:
        """Listing annotation for a raw type code, empty for contiguous files."""
        try:
            return _ANNOTATIONS[cls(code)]
        except ValueError:
            return f"TYPE{code}"


_ANNOTATIONS = {
    FileType.CONTIGUOUS: "",
    FileType.SEQUENTIAL: "SEQ",
    FileType.ISAM: "ISAM",
    FileType.ISAM_DUPLICATES: "ISAM",
    FileType.INDEXED: "INDEXED",
}


class LocationKind(Enum):
    CONTIGUOUS = "contiguous"
    INDIRECT = "indirect"
