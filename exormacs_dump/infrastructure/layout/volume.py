"""Volume identification block (VID), always block 0."""

from __future__ import annotations

from exormacs_dump.domain.entities import VolumeDescriptor

from .fields import be16, be32, fixed, require

VID_BLOCK = 0
VID_SIZE = 0x100

VOLUME_OFFSET = 0x00
USER_OFFSET = 0x04
DIRECTORY_OFFSET = 0x0C
DESCRIPTION_OFFSET = 0x26
DESCRIPTION_WIDTH = 20
SIGNATURE_OFFSET = 0xF8


def decode_volume_descriptor(data: bytes) -> VolumeDescriptor:
    require(data, VID_SIZE, "volume identification block")
    return VolumeDescriptor(
        volume=fixed(data, VOLUME_OFFSET, 4),
        user_number=be16(data, USER_OFFSET),
        directory_block=be32(data, DIRECTORY_OFFSET),
        description=fixed(data, DESCRIPTION_OFFSET, DESCRIPTION_WIDTH),
        signature=bytes(data[SIGNATURE_OFFSET : SIGNATURE_OFFSET + 8]),
        raw=bytes(data[:VID_SIZE]),
    )
