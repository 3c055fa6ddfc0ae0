"""Shared test fixtures: synthetic volume images for every format variant."""

from __future__ import annotations

import io
import struct
from pathlib import Path

import pytest

from exormacs_dump.infrastructure.block_reader import BLOCK_SIZE, BlockReader


class ImageBuilder:
    """Builds a headerless block image in memory, one structure at a time."""

    def __init__(self, blocks: int = 32) -> None:
        self.data = bytearray(blocks * BLOCK_SIZE)

    def put(self, offset: int, payload: bytes) -> ImageBuilder:
        end = offset + len(payload)
        if end > len(self.data):
            self.data.extend(b"\x00" * (end - len(self.data)))
        self.data[offset:end] = payload
        return self

    def fill_block(self, block: int, value: int | None = None) -> ImageBuilder:
        value = block % 256 if value is None else value
        return self.put(block * BLOCK_SIZE, bytes([value]) * BLOCK_SIZE)

    def vid(self, volume: str = "VOL1", directory_block: int = 2, description: str = "TEST VOLUME") -> ImageBuilder:
        self.put(0x00, volume.encode("ascii").ljust(4))
        self.put(0x04, struct.pack(">H", 7))
        self.put(0x0C, struct.pack(">I", directory_block))
        self.put(0x26, description.encode("ascii").ljust(20))
        self.put(0xF8, b"EXORMACS")
        return self

    def backup_directory(self, label: str, entries: list[tuple[str, str, int, int]]) -> ImageBuilder:
        base = 3 * BLOCK_SIZE
        self.put(base, b"\x01\x02\x03\x04\x05\x06" + label.encode("ascii").ljust(10))
        for i, (name, ext, first, count) in enumerate(entries):
            record = _name(name, 8) + _name(ext, 4) + struct.pack(">II", first, count)
            self.put(base + 0x10 + i * 0x32, record.ljust(0x32, b"\xee"))
        return self

    def set_table(self, block: int, entries: list[tuple[str, int]]) -> ImageBuilder:
        base = block * BLOCK_SIZE
        for i, (catalogue, table_block) in enumerate(entries):
            record = _name(catalogue, 8) + struct.pack(">I", table_block) + b"\x00" * 4
            self.put(base + 0x10 + i * 0x10, record)
        return self

    def file_table(
        self,
        block: int,
        catalogue: str,
        entries: list[tuple[str, str, int, int, int]],
    ) -> ImageBuilder:
        """Entries are (name, ext, file type, start block, stored count)."""
        base = block * BLOCK_SIZE
        self.put(base, _name(catalogue, 8))
        for i, (name, ext, file_type, start, stored) in enumerate(entries):
            record = (
                _name(name, 8) + _name(ext, 3) + bytes([file_type])
                + struct.pack(">II", start, stored) + b"\x00" * 4
            )
            self.put(base + 0x10 + i * 0x18, record)
        return self

    def sdb(self, block: int, entries: list[tuple[str, int, int]], next_block: int = 0) -> ImageBuilder:
        """Entries are (catalogue, pointer, access/valid flag)."""
        base = block * BLOCK_SIZE
        self.put(base, struct.pack(">I", next_block))
        for i, (catalogue, pointer, flag) in enumerate(entries):
            record = struct.pack(">H", 1) + _name(catalogue, 8) + struct.pack(">I", pointer)
            self.put(base + 0x10 + i * 0x10, record + bytes([flag, 0]))
        return self

    def pdb(
        self,
        block: int,
        catalogue: str,
        entries: list[tuple[str, str, int, int, int]],
    ) -> ImageBuilder:
        """Entries are (name, ext, start block, end block, file type)."""
        base = block * BLOCK_SIZE
        self.put(base, struct.pack(">H", 1) + _name(catalogue, 8))
        for i, (name, ext, start, end, file_type) in enumerate(entries):
            record = (
                _name(name, 8) + _name(ext, 4) + struct.pack(">II", start, end)
                + bytes([file_type]) + b"\x00" * 3
            )
            self.put(base + 0x10 + i * 0x18, record)
        return self

    def index_block(self, block: int, name: str, ext: str, data_block: int, file_type: int = 0) -> ImageBuilder:
        base = block * BLOCK_SIZE
        self.put(base, _name(name, 8) + _name(ext, 4) + bytes([file_type, 0, 0, 0]))
        self.put(base + 0x10, struct.pack(">I", data_block))
        return self

    def block(self, block: int) -> bytes:
        return bytes(self.data[block * BLOCK_SIZE : (block + 1) * BLOCK_SIZE])

    def truncate(self, size: int) -> ImageBuilder:
        del self.data[size:]
        return self

    def reader(self, name: str = "test.img") -> BlockReader:
        return BlockReader(io.BytesIO(bytes(self.data)), name=name)

    def write(self, path: Path) -> Path:
        path.write_bytes(bytes(self.data))
        return path


def _name(text: str, width: int) -> bytes:
    return text.encode("ascii").ljust(width)


@pytest.fixture
def image_builder():
    return ImageBuilder


@pytest.fixture
def users_image() -> ImageBuilder:
    """Set-table volume: USERS catalogue at block 10 holding DATA.TXT (block 20, 1 block)."""
    builder = ImageBuilder(blocks=24)
    builder.vid(directory_block=2)
    builder.set_table(2, [("USERS", 10)])
    builder.file_table(10, "USERS", [("DATA", "TXT", 0, 20, 0)])
    builder.fill_block(20, 0x5A)
    return builder
