"""
Time zone lookup facade.

Encodes a coordinate once, searches the record table once, and maps the
matching references to zone ids. Points no record covers get a single
longitude-based fallback zone.
"""

from __future__ import annotations
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Tuple, Union, runtime_checkable

from . import fallback
from .config import DatasetConfig
from .geohash import encode
from .names import ZoneNameTable
from .search import PrefixRangeSearch
from .store import AssetSource, RecordStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeZoneResult:
    """
    Zone ids for a coordinate.

    Several ids are returned for points in a cell shared by more than one
    zone; choosing between them is left to the caller.
    """
    time_zones: Tuple[str, ...]
    is_fallback: bool = False

    def __post_init__(self):
        if not self.time_zones:
            raise ValueError("TimeZoneResult needs at least one zone id")

    @property
    def time_zone(self) -> str:
        """The first candidate zone id."""
        return self.time_zones[0]


@runtime_checkable
class SupportsTimeZoneLookup(Protocol):
    """Anything that resolves a coordinate to time zone ids."""

    def get_time_zone(self, latitude: float, longitude: float) -> TimeZoneResult:
        ...


class TimeZoneLookup:
    """
    Offline coordinate to IANA time zone lookup.

    Owns one record table and one zone name table; both are loaded on the
    first query and shared read-only afterwards.
    """

    def __init__(
        self,
        records: AssetSource = None,
        zone_names: AssetSource = None,
        config: Optional[DatasetConfig] = None,
    ):
        """
        Args:
            records: Record table stream or bytes; None uses the packaged table
            zone_names: Zone name stream or bytes; None uses the packaged table
            config: Dataset layout (default: DatasetConfig())
        """
        self.config = config or DatasetConfig()
        self.store = RecordStore(records, self.config)
        self.names = ZoneNameTable(zone_names, self.config.names_resource)
        self.search = PrefixRangeSearch(self.store)

    @classmethod
    def from_files(
        cls,
        records_path: Union[str, Path],
        names_path: Union[str, Path],
        config: Optional[DatasetConfig] = None,
    ) -> TimeZoneLookup:
        """Create a lookup over dataset files written by write_dataset."""
        return cls(
            Path(records_path).read_bytes(),
            Path(names_path).read_bytes(),
            config,
        )

    def load(self) -> None:
        """Load both tables now instead of on the first query."""
        self.store.load()
        self.names.load()

    def zones_for_geohash(self, geocode: str) -> List[str]:
        """
        Zone ids whose records cover a full-precision geohash.

        Args:
            geocode: Geohash of `config.precision` characters

        Returns:
            Zone ids in reference order; empty if no record covers it
        """
        return [self.names.name(ref) for ref in self.search.find(geocode)]

    def get_time_zone(self, latitude: float, longitude: float) -> TimeZoneResult:
        """
        Determine the IANA time zone(s) for a location.

        Args:
            latitude: Latitude in degrees [-90, 90]
            longitude: Longitude in degrees [-180, 180]

        Returns:
            TimeZoneResult with at least one zone id
        """
        geocode = encode(
            latitude, longitude, self.config.precision, self.config.alphabet
        )
        zones = self.zones_for_geohash(geocode)
        if zones:
            return TimeZoneResult(tuple(zones))

        zone = fallback.resolve(longitude)
        logger.debug("No coverage for %s, falling back to %s", geocode, zone)
        return TimeZoneResult((zone,), is_fallback=True)


_default_lookup: Optional[TimeZoneLookup] = None
_default_lock = threading.Lock()


def default_lookup() -> TimeZoneLookup:
    """Process-wide lookup over the packaged dataset, created once."""
    global _default_lookup
    lookup = _default_lookup
    if lookup is None:
        with _default_lock:
            if _default_lookup is None:
                _default_lookup = TimeZoneLookup()
            lookup = _default_lookup
    return lookup


def reset_default_lookup() -> None:
    """Drop the process-wide lookup; the next query reloads the dataset."""
    global _default_lookup
    with _default_lock:
        _default_lookup = None


def get_time_zone(latitude: float, longitude: float) -> TimeZoneResult:
    """
    Determine the IANA time zone(s) for a location using the packaged dataset.

    Args:
        latitude: Latitude in degrees [-90, 90]
        longitude: Longitude in degrees [-180, 180]

    Returns:
        TimeZoneResult with at least one zone id
    """
    return default_lookup().get_time_zone(latitude, longitude)
