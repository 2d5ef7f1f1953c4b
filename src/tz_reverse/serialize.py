"""
Dataset serialization module.

This module writes the two artifacts the lookup reads, starting from
geohash cells that have already been assigned their zone ids:

- Record table: one fixed-width line per (cell, zone) pair, sorted by
  key field bytes, e.g. "9q8yy412\\n" or "dr---077\\n"
- Zone name table: one zone id per line; line i is reference i

Both are gzip compressed by default. Classifying cells against time zone
polygons happens upstream; this module performs no geometry.
"""

import gzip
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from .config import DatasetConfig
from .records import GeohashKey, IndexRecord


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dataset:
    """Serialized record and zone name tables."""
    records: bytes
    zone_names: bytes
    record_count: int
    zone_count: int
    compressed: bool = True


def _compress(data: bytes) -> bytes:
    # Fixed mtime keeps the output byte-for-byte reproducible
    return gzip.compress(data, compresslevel=9, mtime=0)


def parse_key(key: str, config: DatasetConfig) -> GeohashKey:
    """
    Parse a geohash prefix given either bare or sentinel-padded.

    Args:
        key: "9q8" or "9q8--" style key
        config: Dataset layout

    Returns:
        GeohashKey for the real prefix
    """
    if len(key) > config.precision:
        raise ValueError(f"Key {key!r} longer than precision {config.precision}")
    return GeohashKey.from_field(key.ljust(config.precision, config.sentinel), config)


def format_record(key: str, reference: int, config: DatasetConfig) -> bytes:
    """
    Render one record line including its terminator.

    Args:
        key: Geohash prefix, bare or padded
        reference: 1-based zone reference
        config: Dataset layout

    Returns:
        `config.record_width` ASCII bytes
    """
    record = IndexRecord(parse_key(key, config), reference)
    return (record.format(config) + "\n").encode("ascii")


def serialize_records(
    records: Iterable[IndexRecord],
    config: DatasetConfig,
    compress: bool = True,
) -> bytes:
    """
    Serialize records to a sorted record table.

    Records are ordered by key field bytes, then by reference, so border
    runs come out contiguous and in reference order.

    Args:
        records: Records in any order
        config: Dataset layout
        compress: Whether to gzip the table

    Returns:
        Serialized (and optionally compressed) bytes
    """
    lines = sorted(record.format(config) for record in records)
    data = "".join(line + "\n" for line in lines).encode("ascii")
    return _compress(data) if compress else data


def serialize_zone_names(names: Iterable[str], compress: bool = True) -> bytes:
    """
    Serialize zone ids, one per line, in reference order.

    Args:
        names: Zone ids; the first one is reference 1
        compress: Whether to gzip the table

    Returns:
        Serialized (and optionally compressed) bytes
    """
    buffer = []
    for name in names:
        if not name or "\n" in name or "\r" in name:
            raise ValueError(f"Invalid zone id {name!r}")
        buffer.append(name + "\n")
    data = "".join(buffer).encode("utf-8")
    return _compress(data) if compress else data


def _normalize_cells(
    cells: Mapping[str, Iterable[str]],
    config: DatasetConfig,
) -> Dict[str, FrozenSet[str]]:
    """Strip padding from keys and drop cells without zones."""
    result: Dict[str, FrozenSet[str]] = {}
    for key, zones in cells.items():
        prefix = parse_key(key, config).prefix
        zone_set = frozenset(zones)
        if not zone_set:
            continue
        if prefix in result and result[prefix] != zone_set:
            raise ValueError(f"Cell {prefix!r} given twice with different zones")
        result[prefix] = zone_set
    return result


def compact_cells(
    cells: Mapping[str, Iterable[str]],
    config: DatasetConfig,
) -> Dict[str, FrozenSet[str]]:
    """
    Collapse uniform sibling groups into their parent cell.

    When every child of a cell is present and all carry the same zone
    set, the children are replaced by the parent prefix. Merged parents
    are considered again one level up, so a uniform region ends up as a
    single short key.

    Args:
        cells: Mapping of geohash prefix -> zone ids
        config: Dataset layout

    Returns:
        Mapping of geohash prefix -> frozenset of zone ids
    """
    result = {
        GeohashKey(prefix): zones
        for prefix, zones in _normalize_cells(cells, config).items()
    }

    for length in range(config.precision, 1, -1):
        parents = {key.parent() for key in result if key.length == length}
        for parent in sorted(parents):
            if parent in result:
                continue
            children = parent.children(config)
            zone_sets = {result.get(child) for child in children}
            # a missing child shows up as None
            if len(zone_sets) != 1 or None in zone_sets:
                continue
            for child in children:
                del result[child]
            result[parent] = zone_sets.pop()

    return {key.prefix: zones for key, zones in result.items()}


def find_overlap(prefixes: Iterable[str]) -> Optional[Tuple[str, str]]:
    """
    Find a cell that is also covered by one of its ancestors.

    Every key sorting between an ancestor and its descendant is itself a
    descendant of that ancestor, so checking sorted neighbours is enough.

    Args:
        prefixes: Geohash prefixes

    Returns:
        (ancestor, descendant) for the first overlap, or None
    """
    keys = sorted({GeohashKey(prefix) for prefix in prefixes})
    for previous, current in zip(keys, keys[1:]):
        if previous.is_ancestor_of(current):
            return previous.prefix, current.prefix
    return None


def build_dataset(
    cells: Mapping[str, Iterable[str]],
    config: Optional[DatasetConfig] = None,
    compact: bool = True,
    compress: bool = True,
) -> Dataset:
    """
    Build both tables from classified geohash cells.

    Zone ids get references in sorted order. A cell in several zones
    yields one record per zone.

    Args:
        cells: Mapping of geohash prefix -> zone ids covering that cell
        config: Dataset layout (default: DatasetConfig())
        compact: Whether to collapse uniform sibling groups first
        compress: Whether to gzip both tables

    Returns:
        Serialized Dataset
    """
    config = config or DatasetConfig()
    zone_sets = compact_cells(cells, config) if compact else _normalize_cells(cells, config)

    overlap = find_overlap(zone_sets)
    if overlap is not None:
        raise ValueError(
            f"Cell {overlap[1]!r} is also covered by its ancestor {overlap[0]!r}"
        )

    zones: List[str] = sorted(set().union(*zone_sets.values())) if zone_sets else []
    if len(zones) > config.max_reference:
        raise ValueError(
            f"{len(zones)} zones do not fit in {config.reference_width}-digit references"
        )
    references = {zone: i for i, zone in enumerate(zones, start=1)}

    records = [
        IndexRecord(GeohashKey(prefix), references[zone])
        for prefix, zone_set in zone_sets.items()
        for zone in zone_set
    ]

    logger.debug(
        "Built dataset: %d cells, %d records, %d zones",
        len(zone_sets), len(records), len(zones),
    )
    return Dataset(
        records=serialize_records(records, config, compress=compress),
        zone_names=serialize_zone_names(zones, compress=compress),
        record_count=len(records),
        zone_count=len(zones),
        compressed=compress,
    )


def write_dataset(
    dataset: Dataset,
    directory: Union[str, Path],
    config: Optional[DatasetConfig] = None,
) -> Tuple[Path, Path]:
    """
    Write both tables into a directory under their configured asset names.

    Args:
        dataset: Dataset from build_dataset
        directory: Output directory (created if missing)
        config: Dataset layout supplying the file names

    Returns:
        Tuple of (records_path, names_path)
    """
    config = config or DatasetConfig()
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    records_path = directory / config.records_resource
    names_path = directory / config.names_resource
    records_path.write_bytes(dataset.records)
    names_path.write_bytes(dataset.zone_names)

    logger.info(
        "Wrote %d records to %s and %d zones to %s",
        dataset.record_count, records_path, dataset.zone_count, names_path,
    )
    return records_path, names_path
