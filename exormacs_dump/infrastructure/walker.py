"""Directory walker: descends from the volume descriptor to file entries.

Walks at most two levels (root table, then one catalogue table per root
entry) and yields events in on-disk order. Per-table and per-entry problems
are handed to ``on_problem`` and never stop the walk; only an unreadable
volume descriptor propagates as ImageIOError.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator

from exormacs_dump.domain.entities import (
    Catalogue,
    CatalogueEntry,
    CatalogueFile,
    TableHeader,
    Volume,
    WalkEvent,
)
from exormacs_dump.domain.exceptions import (
    DecodeError,
    DomainException,
    NotSupportedError,
    TruncatedRecordError,
)

from .block_reader import BlockReader
from .layout.fields import TableLayout, iter_records
from .layout.variants import EntryDecoder, HeaderDecoder, Sentinel, VariantLayout
from .layout.volume import VID_BLOCK, decode_volume_descriptor

logger = logging.getLogger(__name__)

ProblemHandler = Callable[[DomainException], None]


def _log_problem(problem: DomainException) -> None:
    logger.warning("%s", problem)


class DirectoryWalker:
    """Enumerates catalogues and files of one volume image for a given layout."""

    def __init__(self, layout: VariantLayout, on_problem: ProblemHandler | None = None) -> None:
        self._layout = layout
        self._on_problem = on_problem or _log_problem

    def walk(self, reader: BlockReader) -> Iterator[WalkEvent]:
        layout = self._layout
        descriptor = decode_volume_descriptor(reader.read(VID_BLOCK, 1))
        root_block = (
            layout.fixed_root_block
            if layout.fixed_root_block is not None
            else descriptor.directory_block
        )
        logger.debug(
            "Volume '%s', %s root table at block %d",
            descriptor.name, layout.variant.value, root_block,
        )
        yield Volume(descriptor=descriptor, root_block=root_block)

        loaded = self._load_table(
            reader, root_block, layout.root_table, layout.decode_root_header
        )
        if loaded is None:
            return
        header, data = loaded
        self._check_chain(header)

        if not layout.nested:
            yield Catalogue(name="", header=header)
            yield from self._files(
                "", data, layout.root_table, layout.is_root_empty, layout.decode_root_file
            )
            return

        for index, raw in self._records(data, layout.root_table, layout.is_root_empty):
            try:
                entry = layout.decode_catalogue(index, raw)
            except DecodeError as e:
                self._on_problem(e)
                continue
            if layout.is_indirect is not None and layout.is_indirect(entry):
                yield from self._indirect(reader, entry)
            else:
                yield from self._catalogue(reader, entry)

    def _catalogue(self, reader: BlockReader, entry: CatalogueEntry) -> Iterator[WalkEvent]:
        layout = self._layout
        name = entry.name.trimmed()
        loaded = self._load_table(
            reader, entry.pointer, layout.file_table, layout.decode_file_header
        )
        if loaded is None:
            return
        header, data = loaded
        self._check_chain(header)
        yield Catalogue(name=name, header=header)
        yield from self._files(
            name, data, layout.file_table, layout.is_file_empty, layout.decode_file_entry
        )

    def _indirect(self, reader: BlockReader, entry: CatalogueEntry) -> Iterator[WalkEvent]:
        data = reader.read(entry.pointer, 1, allow_short=True)
        try:
            file_entry = self._layout.decode_index_block(entry, data)
        except DecodeError as e:
            self._on_problem(e)
            return
        yield CatalogueFile(catalogue="", entry=file_entry)

    def _files(
        self,
        catalogue: str,
        data: bytes,
        table: TableLayout,
        is_empty: Sentinel,
        decode: EntryDecoder,
    ) -> Iterator[CatalogueFile]:
        for index, raw in self._records(data, table, is_empty):
            try:
                entry = decode(index, raw)
            except DecodeError as e:
                self._on_problem(e)
                continue
            yield CatalogueFile(catalogue=catalogue, entry=entry)

    def _records(
        self,
        data: bytes,
        table: TableLayout,
        is_empty: Sentinel,
    ) -> Iterator[tuple[int, bytes]]:
        try:
            yield from iter_records(data, table, is_empty)
        except TruncatedRecordError as e:
            self._on_problem(e)

    def _load_table(
        self,
        reader: BlockReader,
        block: int,
        table: TableLayout,
        decode_header: HeaderDecoder,
    ) -> tuple[TableHeader, bytes] | None:
        data = reader.read(block, table.blocks, allow_short=True)
        try:
            header = decode_header(data, block)
        except TruncatedRecordError as e:
            self._on_problem(e)
            return None
        return header, data

    def _check_chain(self, header: TableHeader) -> None:
        # Chained directory blocks are decoded but intentionally not followed.
        if header.next_block:
            self._on_problem(
                NotSupportedError(
                    f"chained directory: table at block {header.block} continues at "
                    f"block {header.next_block}, not followed"
                )
            )
