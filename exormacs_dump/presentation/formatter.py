"""Line-oriented listing formatter for volumes, catalogues and files."""

from __future__ import annotations

from exormacs_dump.domain.entities import Catalogue, CatalogueFile, Volume
from exormacs_dump.domain.enums import LocationKind
from exormacs_dump.domain.exceptions import (
    AssemblyError,
    DecodeError,
    DomainException,
    ImageIOError,
    NotSupportedError,
    TruncatedRecordError,
)

_PROBLEM_LABELS: dict[type, str] = {
    ImageIOError: "I/O error",
    TruncatedRecordError: "truncated",
    DecodeError: "decode error",
    NotSupportedError: "not supported",
    AssemblyError: "assembly failed",
}


class ListingFormatter:
    """Formats walk events as plain listing lines for standard output."""

    def format_image(self, name: str) -> str:
        return f"Image: {name}"

    def format_volume(self, volume: Volume) -> str:
        vd = volume.descriptor
        line = f"Volume: {vd.volume.text():<4}  {vd.description.trimmed()}"
        return f"{line.rstrip()}  directory_block={volume.root_block}"

    def format_catalogue(self, catalogue: Catalogue) -> str:
        name = catalogue.name or "<root>"
        line = f"Catalogue: {name:<8} block={catalogue.header.block}"
        if catalogue.header.label and catalogue.header.label != catalogue.name:
            line += f"  label={catalogue.header.label}"
        return line

    def format_file(self, item: CatalogueFile) -> str:
        entry = item.entry
        location = entry.location
        line = (
            f"{item.catalogue:<8} {entry.display_name:<13} "
            f"first_block={location.start_block:<4d} size={location.block_count:<5d}"
        )
        if location.kind is LocationKind.INDIRECT:
            line += f" data_block={location.pointer}"
        if entry.annotation:
            line += f" {entry.annotation}"
        return line.rstrip()

    def format_problem(self, problem: DomainException) -> str:
        return f"  ! {self._label(problem)}: {problem}"

    def format_summary(self, listed: int, extracted: int, skipped: int, failed: int) -> str:
        return (
            f"{listed} files listed, {extracted} extracted, "
            f"{skipped} skipped, {failed} failed"
        )

    @staticmethod
    def hexdump(label: str, data: bytes) -> str:
        return f"{label}: " + " ".join(f"{b:02X}" for b in data)

    @staticmethod
    def _label(problem: DomainException) -> str:
        for cls in type(problem).__mro__:
            if cls in _PROBLEM_LABELS:
                return _PROBLEM_LABELS[cls]
        return "error"
