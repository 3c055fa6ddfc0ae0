"""Append-only output sink rooted at the output directory."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

logger = logging.getLogger(__name__)


class FileSystemSink:
    """Writes extracted files below ``root``, always appending.

    Appending lets a file that spans several volume images be rebuilt by
    processing the images in physical order.
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, virtual_path: str) -> Path:
        return self.root.joinpath(*virtual_path.split("/"))

    @contextmanager
    def open(self, virtual_path: str) -> Iterator[BinaryIO]:
        """Open a destination for append; it is closed and flushed on exit."""
        path = self.path_for(virtual_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "ab") as f:
            yield f
        logger.debug("Closed %s", path)

    def append_bytes(self, virtual_path: str, data: bytes) -> None:
        with self.open(virtual_path) as f:
            f.write(data)
