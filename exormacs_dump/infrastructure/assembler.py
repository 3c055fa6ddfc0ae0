"""File assembler: reads a file's blocks in order and appends them to the sink."""

from __future__ import annotations

import logging
from typing import Sequence

from exormacs_dump.domain.entities import CatalogueFile, FileLocation
from exormacs_dump.domain.enums import LocationKind
from exormacs_dump.domain.exceptions import AssemblyError, ImageIOError, NotSupportedError

from .block_reader import BlockReader
from .sink import FileSystemSink

logger = logging.getLogger(__name__)


def block_sequence(location: FileLocation) -> Sequence[int]:
    """Blocks making up a file, in output order."""
    if location.kind is LocationKind.INDIRECT:
        return (location.start_block, location.pointer)
    return range(location.start_block, location.start_block + location.block_count)


class FileAssembler:
    """Appends the blocks of contiguous and indirect files to their destination.

    Bytes already written stay in place when a later block cannot be read.
    """

    def __init__(self, sink: FileSystemSink) -> None:
        self._sink = sink

    def assemble(self, reader: BlockReader, item: CatalogueFile) -> int:
        """Append ``item`` to its destination and return the number of bytes written."""
        entry = item.entry
        destination = item.destination
        if not entry.is_supported:
            raise NotSupportedError(
                f"{item.catalogue}/{entry.display_name}: "
                f"{entry.annotation} files cannot be extracted"
            )

        blocks = block_sequence(entry.location)
        image_blocks = reader.block_count
        last = max(blocks[0], blocks[-1]) if blocks else -1
        if last >= image_blocks:
            logger.warning(
                "%s: blocks %d..%d run past the end of %s (%d blocks); output will be partial",
                destination, blocks[0], last, reader.name, image_blocks,
            )

        written = 0
        try:
            with self._sink.open(destination) as out:
                for block in blocks:
                    try:
                        data = reader.read(block, 1)
                    except ImageIOError as e:
                        raise AssemblyError(destination, written, str(e)) from e
                    out.write(data)
                    written += len(data)
        except OSError as e:
            raise AssemblyError(destination, written, f"cannot write output: {e}") from e

        logger.debug("Appended %d bytes to %s", written, destination)
        return written
