"""Random-access reader over a headerless, block-addressed volume image."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from exormacs_dump.domain.exceptions import ImageIOError

logger = logging.getLogger(__name__)

BLOCK_SIZE = 0x100


class BlockReader:
    """Reads whole 256-byte blocks at absolute block offsets."""

    def __init__(self, stream: BinaryIO, name: str = "<image>") -> None:
        self._stream = stream
        self.name = name

    @property
    def block_count(self) -> int:
        size = self._stream.seek(0, os.SEEK_END)
        return size // BLOCK_SIZE

    def read(self, start_block: int, count: int, allow_short: bool = False) -> bytes:
        """Read ``count`` blocks starting at ``start_block``.

        A short read raises ImageIOError unless ``allow_short`` is set, in which
        case whatever bytes exist are returned.
        """
        if start_block < 0 or count < 0:
            raise ImageIOError(f"{self.name}: invalid block range {start_block}+{count}")
        wanted = count * BLOCK_SIZE
        try:
            self._stream.seek(start_block * BLOCK_SIZE, os.SEEK_SET)
            data = self._stream.read(wanted)
        except OSError as e:
            raise ImageIOError(f"{self.name}: read of block {start_block} failed: {e}") from e

        if len(data) < wanted:
            if allow_short:
                logger.debug(
                    "%s: short read at block %d: %d of %d bytes",
                    self.name, start_block, len(data), wanted,
                )
                return data
            raise ImageIOError(
                f"{self.name}: short read at block {start_block}: "
                f"got {len(data)} of {wanted} bytes"
            )
        return data

    def read_block(self, block_index: int, count: int = 1) -> bytes:
        return self.read(block_index, count)


@contextmanager
def open_image(path: Path) -> Iterator[BlockReader]:
    """Open an image file for block reads; open failures surface as ImageIOError."""
    try:
        stream = open(path, "rb")
    except OSError as e:
        raise ImageIOError(f"Cannot open image '{path}': {e}") from e
    with stream:
        yield BlockReader(stream, name=str(path))
