"""Volume extraction run: listing plus optional file extraction for each image."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

import click

from exormacs_dump.config import AppConfig
from exormacs_dump.domain.entities import Catalogue, CatalogueFile, Volume
from exormacs_dump.domain.enums import FormatVariant
from exormacs_dump.domain.exceptions import (
    AssemblyError,
    DomainException,
    ImageIOError,
    NotSupportedError,
)
from exormacs_dump.infrastructure.assembler import FileAssembler
from exormacs_dump.infrastructure.block_reader import BlockReader, open_image
from exormacs_dump.infrastructure.layout.variants import VariantLayout, get_layout
from exormacs_dump.infrastructure.sink import FileSystemSink
from exormacs_dump.infrastructure.walker import DirectoryWalker
from exormacs_dump.presentation.formatter import ListingFormatter

logger = logging.getLogger(__name__)

Emit = Callable[[str], None]


@dataclass
class ImageReport:
    image: str
    opened: bool = True
    files_listed: int = 0
    files_extracted: int = 0
    files_skipped: int = 0
    files_failed: int = 0
    bytes_written: int = 0
    problems: list[str] = field(default_factory=list)


class VolumeExtractor:
    """Lists one or more volume images and appends their files to the sink.

    Errors are contained per entry and per table; an image that cannot be
    opened or whose volume descriptor cannot be read is reported and skipped.
    """

    def __init__(
        self,
        layout: VariantLayout,
        formatter: ListingFormatter,
        emit: Emit,
        assembler: FileAssembler | None = None,
        debug: bool = False,
    ) -> None:
        self._layout = layout
        self._formatter = formatter
        self._emit = emit
        self._assembler = assembler
        self._debug = debug

    def process_images(self, paths: Iterable[Path]) -> list[ImageReport]:
        """Process images in the given order; later images append after earlier ones."""
        return [self.process_image(path) for path in paths]

    def process_image(self, path: Path) -> ImageReport:
        self._emit(self._formatter.format_image(str(path)))
        try:
            with open_image(path) as reader:
                return self.process(reader)
        except ImageIOError as e:
            logger.error("%s", e)
            report = ImageReport(image=str(path), opened=False)
            self._report_problem(report, e)
            return report

    def process(self, reader: BlockReader) -> ImageReport:
        report = ImageReport(image=reader.name)
        walker = DirectoryWalker(
            self._layout, on_problem=lambda problem: self._report_problem(report, problem)
        )
        try:
            for event in walker.walk(reader):
                if isinstance(event, Volume):
                    self._on_volume(event)
                elif isinstance(event, Catalogue):
                    self._on_catalogue(event)
                else:
                    self._on_file(reader, event, report)
        except ImageIOError as e:
            logger.error("Cannot read volume descriptor of %s: %s", reader.name, e)
            self._report_problem(report, e)

        self._emit(
            self._formatter.format_summary(
                report.files_listed,
                report.files_extracted,
                report.files_skipped,
                report.files_failed,
            )
        )
        return report

    def _on_volume(self, volume: Volume) -> None:
        self._emit(self._formatter.format_volume(volume))
        if self._debug:
            self._emit(self._formatter.hexdump("vid", volume.descriptor.raw[:0x40]))

    def _on_catalogue(self, catalogue: Catalogue) -> None:
        self._emit(self._formatter.format_catalogue(catalogue))
        if self._debug:
            self._emit(self._formatter.hexdump("header", catalogue.header.raw))

    def _on_file(self, reader: BlockReader, item: CatalogueFile, report: ImageReport) -> None:
        report.files_listed += 1
        if self._debug:
            self._emit(self._formatter.hexdump("entry", item.entry.raw))
        self._emit(self._formatter.format_file(item))

        if self._assembler is None:
            return
        try:
            written = self._assembler.assemble(reader, item)
        except NotSupportedError as e:
            report.files_skipped += 1
            self._report_problem(report, e)
        except AssemblyError as e:
            report.files_failed += 1
            report.bytes_written += e.bytes_written
            self._report_problem(report, e)
        else:
            report.files_extracted += 1
            report.bytes_written += written

    def _report_problem(self, report: ImageReport, problem: DomainException) -> None:
        logger.warning("%s: %s", report.image, problem)
        line = self._formatter.format_problem(problem)
        report.problems.append(line)
        self._emit(line)


def create_extractor(config: AppConfig, emit: Emit = click.echo) -> VolumeExtractor:
    """Build an extractor for the configured variant and output directory."""
    variant = FormatVariant.from_string(config.format.variant)
    if variant is None:
        raise ValueError(f"Unknown format variant: {config.format.variant}")

    assembler = None
    if config.output.extract:
        assembler = FileAssembler(FileSystemSink(Path(config.output.directory)))

    return VolumeExtractor(
        layout=get_layout(variant),
        formatter=ListingFormatter(),
        emit=emit,
        assembler=assembler,
        debug=config.listing.debug,
    )
