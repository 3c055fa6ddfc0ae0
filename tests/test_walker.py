"""Tests for DirectoryWalker across format variants."""

import pytest

from exormacs_dump.domain.entities import Catalogue, CatalogueFile, Volume
from exormacs_dump.domain.enums import FormatVariant, LocationKind
from exormacs_dump.domain.exceptions import (
    DecodeError,
    ImageIOError,
    NotSupportedError,
    TruncatedRecordError,
)
from exormacs_dump.infrastructure.layout.variants import get_layout
from exormacs_dump.infrastructure.walker import DirectoryWalker


def walk(builder, variant):
    problems = []
    walker = DirectoryWalker(get_layout(variant), on_problem=problems.append)
    events = list(walker.walk(builder.reader()))
    return events, problems


def files(events):
    return [e for e in events if isinstance(e, CatalogueFile)]


class TestSetTable:
    def test_single_catalogue_single_file(self, users_image):
        events, problems = walk(users_image, FormatVariant.SET_TABLE)

        assert problems == []
        assert isinstance(events[0], Volume)
        assert events[0].root_block == 2
        assert isinstance(events[1], Catalogue)
        assert events[1].name == "USERS"
        assert events[1].header.block == 10

        [item] = files(events)
        assert item.catalogue == "USERS"
        assert item.entry.display_name == "DATA.TXT"
        assert item.entry.location.start_block == 20
        assert item.entry.location.block_count == 1
        assert item.destination == "USERS/DATA.TXT"

    def test_sentinel_at_index_three(self, image_builder):
        builder = image_builder(blocks=16).vid(directory_block=2)
        builder.set_table(2, [("USERS", 10)])
        builder.file_table(
            10,
            "USERS",
            [
                ("A", "TXT", 0, 12, 0),
                ("B", "TXT", 0, 13, 0),
                ("C", "TXT", 0, 14, 0),
                ("\x00ZOMBIE", "TXT", 0, 15, 0),
                ("E", "TXT", 0, 15, 0),
            ],
        )
        events, _ = walk(builder, FormatVariant.SET_TABLE)
        assert [f.entry.display_name for f in files(events)] == ["A.TXT", "B.TXT", "C.TXT"]

    def test_multiple_catalogues_in_order(self, image_builder):
        builder = image_builder(blocks=20).vid(directory_block=2)
        builder.set_table(2, [("ALPHA", 4), ("BETA", 6)])
        builder.file_table(4, "ALPHA", [("ONE", "SA", 0, 10, 0)])
        builder.file_table(6, "BETA", [("TWO", "SA", 0, 11, 1), ("THREE", "LO", 0, 12, 0)])
        events, _ = walk(builder, FormatVariant.SET_TABLE)
        assert [(f.catalogue, f.entry.display_name) for f in files(events)] == [
            ("ALPHA", "ONE.SA"),
            ("BETA", "TWO.SA"),
            ("BETA", "THREE.LO"),
        ]

    def test_catalogue_beyond_image_is_contained(self, image_builder):
        builder = image_builder(blocks=16).vid(directory_block=2)
        builder.set_table(2, [("LOST", 500), ("FOUND", 10)])
        builder.file_table(10, "FOUND", [("DATA", "TXT", 0, 12, 0)])
        events, problems = walk(builder, FormatVariant.SET_TABLE)
        assert [f.catalogue for f in files(events)] == ["FOUND"]
        assert len(problems) == 1
        assert isinstance(problems[0], TruncatedRecordError)

    def test_truncated_table_keeps_earlier_entries(self, image_builder):
        builder = image_builder(blocks=12).vid(directory_block=2)
        builder.set_table(2, [("USERS", 10)])
        builder.file_table(10, "USERS", [("A", "TXT", 0, 3, 0)] * 20)
        builder.truncate(10 * 256 + 0x10 + 3 * 0x18 + 5)
        events, problems = walk(builder, FormatVariant.SET_TABLE)
        assert len(files(events)) == 3
        assert [type(p) for p in problems] == [TruncatedRecordError]


class TestBackup:
    def test_fixed_directory_block(self, image_builder):
        builder = image_builder(blocks=40).vid(directory_block=99)
        builder.backup_directory("WEEKLY", [("MONITOR", "SY", 20, 3), ("EDIT", "LO", 23, 1)])
        events, problems = walk(builder, FormatVariant.BACKUP)

        assert problems == []
        assert events[0].root_block == 3
        assert events[1].name == ""
        assert events[1].header.label == "WEEKLY"
        assert [(f.catalogue, f.entry.display_name) for f in files(events)] == [
            ("", "MONITOR.SY"),
            ("", "EDIT.LO"),
        ]
        assert files(events)[0].entry.location.block_count == 3

    def test_full_table_stops_at_capacity(self, image_builder):
        builder = image_builder(blocks=40).vid()
        builder.backup_directory("FULL", [(f"F{i}", "DAT", 30, 1) for i in range(50)])
        # garbage right after the table must never be read as entry 50
        builder.put(3 * 256 + 0x10 + 50 * 0x32, b"GARBAGE!" * 8)
        events, problems = walk(builder, FormatVariant.BACKUP)
        assert len(files(events)) == 50
        assert problems == []


class TestExormacs:
    def _builder(self, image_builder, next_block=0):
        builder = image_builder(blocks=40).vid(directory_block=2)
        builder.sdb(2, [("SYS", 4, 1), ("USER", 6, 1)], next_block=next_block)
        builder.pdb(4, "SYS", [("LOADER", "SY", 20, 21, 0)])
        builder.pdb(6, "USER", [("BAD", "X", 9, 8, 0), ("NOTES", "TXT", 22, 22, 0)])
        return builder

    def test_two_levels(self, image_builder):
        events, problems = walk(self._builder(image_builder), FormatVariant.EXORMACS)
        items = files(events)
        assert [(f.catalogue, f.entry.display_name, f.entry.location.block_count) for f in items] == [
            ("SYS", "LOADER.SY", 2),
            ("USER", "NOTES.TXT", 1),
        ]
        assert len(problems) == 1
        assert isinstance(problems[0], DecodeError)

    def test_chained_sdb_reported_not_followed(self, image_builder):
        builder = self._builder(image_builder, next_block=30)
        builder.sdb(30, [("HIDDEN", 8, 1)])
        builder.pdb(8, "HIDDEN", [("SECRET", "TXT", 25, 25, 0)])
        events, problems = walk(builder, FormatVariant.EXORMACS)
        assert "HIDDEN" not in [f.catalogue for f in files(events)]
        chained = [p for p in problems if isinstance(p, NotSupportedError)]
        assert len(chained) == 1
        assert "block 30" in str(chained[0])


class TestIndexed:
    def test_blank_catalogue_is_indirect_file(self, image_builder):
        builder = image_builder(blocks=40).vid(directory_block=2)
        builder.sdb(2, [("        ", 12, 1), ("DATA", 4, 1), ("IGNORED", 6, 0), ("AFTER", 6, 1)])
        builder.pdb(4, "DATA", [("REPORT", "TXT", 20, 20, 0)])
        builder.index_block(12, "CUSTOMER", "KEYS", data_block=13)
        events, problems = walk(builder, FormatVariant.INDEXED)

        assert problems == []
        items = files(events)
        assert [(f.catalogue, f.entry.display_name) for f in items] == [
            ("", "CUSTOMER.KEYS"),
            ("DATA", "REPORT.TXT"),
        ]
        location = items[0].entry.location
        assert location.kind is LocationKind.INDIRECT
        assert (location.start_block, location.pointer) == (12, 13)


class TestVolumeErrors:
    def test_empty_image_raises(self, image_builder):
        builder = image_builder(blocks=0)
        walker = DirectoryWalker(get_layout(FormatVariant.SET_TABLE))
        with pytest.raises(ImageIOError):
            list(walker.walk(builder.reader()))

    def test_walking_twice_is_identical(self, users_image):
        first, _ = walk(users_image, FormatVariant.SET_TABLE)
        second, _ = walk(users_image, FormatVariant.SET_TABLE)
        assert first == second
