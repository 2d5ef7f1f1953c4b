"""
tz-reverse: Offline coordinate to IANA time zone lookup.

This package maps WGS84 (lat, lon) coordinates to IANA time zone ids using
a precomputed geohash index: a sorted table of fixed-width records whose
keys are geohash prefixes of varying length. Points outside every zone
fall back to a nominal Etc/GMT zone derived from the longitude.
"""

__version__ = "0.1.0"

from .config import DatasetConfig, BASE32, SENTINEL
from .exceptions import (
    TzReverseError,
    InvalidCoordinateError,
    RecordIndexError,
    DatasetLoadError,
)
from .geohash import encode, decode, decode_bbox
from .records import GeohashKey, IndexRecord
from .store import RecordStore
from .search import PrefixRangeSearch
from .names import ZoneNameTable
from .fallback import resolve as resolve_fallback
from .lookup import SupportsTimeZoneLookup, TimeZoneLookup, TimeZoneResult, get_time_zone
from .serialize import Dataset, build_dataset, write_dataset

__all__ = [
    "DatasetConfig",
    "BASE32",
    "SENTINEL",
    "TzReverseError",
    "InvalidCoordinateError",
    "RecordIndexError",
    "DatasetLoadError",
    "encode",
    "decode",
    "decode_bbox",
    "GeohashKey",
    "IndexRecord",
    "RecordStore",
    "PrefixRangeSearch",
    "ZoneNameTable",
    "resolve_fallback",
    "SupportsTimeZoneLookup",
    "TimeZoneLookup",
    "TimeZoneResult",
    "get_time_zone",
    "Dataset",
    "build_dataset",
    "write_dataset",
]
