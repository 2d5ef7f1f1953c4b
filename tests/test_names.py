"""Tests for the zone name table."""

import gzip
import io

import pytest
from tz_reverse.exceptions import DatasetLoadError, RecordIndexError
from tz_reverse.names import ZoneNameTable


NAMES = b"America/Chicago\nEurope/Paris\nAsia/Tokyo\n"


class TestZoneNameTable:
    """Tests for ZoneNameTable."""

    def test_name(self):
        """Test 1-based lookups."""
        table = ZoneNameTable(NAMES)
        assert table.name(1) == "America/Chicago"
        assert table.name(3) == "Asia/Tokyo"

    def test_len(self):
        """Test that the trailing newline does not add an entry."""
        assert len(ZoneNameTable(NAMES)) == 3

    def test_no_trailing_newline(self):
        """Test a table whose last line is unterminated."""
        table = ZoneNameTable(b"UTC\nEtc/GMT+5")
        assert len(table) == 2
        assert table.name(2) == "Etc/GMT+5"

    def test_crlf(self):
        """Test that Windows line endings are tolerated."""
        table = ZoneNameTable(b"UTC\r\nEurope/Paris\r\n")
        assert table.name(2) == "Europe/Paris"

    def test_gzip_stream(self):
        """Test a compressed stream source."""
        table = ZoneNameTable(io.BytesIO(gzip.compress(NAMES)))
        assert table.name(2) == "Europe/Paris"

    def test_out_of_range(self):
        """Test that references outside the table are rejected."""
        table = ZoneNameTable(NAMES)
        with pytest.raises(RecordIndexError):
            table.name(0)
        with pytest.raises(RecordIndexError):
            table.name(4)


class TestLoadErrors:
    """Tests for name table load failures."""

    def test_empty_entry(self):
        """Test that blank lines are rejected."""
        with pytest.raises(DatasetLoadError):
            len(ZoneNameTable(b"UTC\n\nEurope/Paris\n"))

    def test_invalid_utf8(self):
        """Test that undecodable bytes are rejected."""
        with pytest.raises(DatasetLoadError):
            ZoneNameTable(b"\xff\xfe\n").name(1)

    def test_missing_packaged_asset(self):
        """Test that a missing packaged table is a load error."""
        with pytest.raises(DatasetLoadError):
            ZoneNameTable(resource="missing.dat.gz").load()
