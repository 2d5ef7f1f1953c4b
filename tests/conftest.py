"""Shared fixtures: small in-memory datasets."""

import pytest

from tz_reverse.config import DatasetConfig
from tz_reverse.lookup import TimeZoneLookup
from tz_reverse.serialize import build_dataset, format_record


@pytest.fixture
def sample_cells():
    """
    Cells mixing short prefixes, full-precision leaves, and one border
    cell shared by two zones.
    """
    return {
        "dr5": ["America/New_York"],
        "9q8yy": ["America/Los_Angeles"],
        "9q8yz": ["America/Los_Angeles", "America/Tijuana"],
        "u4pru": ["Europe/Copenhagen"],
        "u33d": ["Europe/Berlin"],
        "xn7": ["Asia/Tokyo"],
    }


@pytest.fixture
def sample_zones():
    """Reference order of the sample zones (sorted zone ids)."""
    return [
        "America/Los_Angeles",
        "America/New_York",
        "America/Tijuana",
        "Asia/Tokyo",
        "Europe/Berlin",
        "Europe/Copenhagen",
    ]


@pytest.fixture
def toy_config():
    """Two-character keys over a binary alphabet."""
    return DatasetConfig(precision=2, alphabet="01")


@pytest.fixture
def sample_dataset(sample_cells):
    """Compressed dataset built from the sample cells without compaction."""
    return build_dataset(sample_cells, compact=False)


@pytest.fixture
def sample_lookup(sample_dataset):
    """Lookup over the sample dataset."""
    return TimeZoneLookup(sample_dataset.records, sample_dataset.zone_names)


@pytest.fixture
def toy_lookup(toy_config):
    """Lookup over [("0-", 1), ("01", 2)] with names Zone/A, Zone/B."""
    records = format_record("0", 1, toy_config) + format_record("01", 2, toy_config)
    names = b"Zone/A\nZone/B\n"
    return TimeZoneLookup(records, names, toy_config)
