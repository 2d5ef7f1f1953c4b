"""
Record types for the geohash index table.

A key field on disk is a fixed-width string; keys shorter than the
precision are padded with the sentinel. In memory the key is held as
its real prefix only, and the padding is added or stripped at the byte
boundary.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

from .config import DatasetConfig


@dataclass(frozen=True, order=True)
class GeohashKey:
    """
    A geohash prefix of length 1..precision.

    A key shorter than the precision stands for a whole unsubdivided
    cell: every full-length geohash starting with it resolves to the
    same zone set.
    """
    prefix: str

    def __post_init__(self):
        if not self.prefix:
            raise ValueError("GeohashKey prefix must not be empty")

    @property
    def length(self) -> int:
        """Number of real (non-sentinel) characters."""
        return len(self.prefix)

    @classmethod
    def from_field(cls, field: str, config: DatasetConfig) -> GeohashKey:
        """
        Parse a raw, possibly padded key field.

        Args:
            field: Key field exactly `config.precision` characters wide
            config: Dataset layout

        Returns:
            GeohashKey holding the unpadded prefix
        """
        if len(field) != config.precision:
            raise ValueError(
                f"Key field {field!r} is not {config.precision} characters wide"
            )
        prefix, _, padding = field.partition(config.sentinel)
        # everything after the first sentinel must be padding
        if padding.strip(config.sentinel):
            raise ValueError(f"Malformed key field {field!r}")
        cls._check_symbols(prefix, config)
        return cls(prefix)

    def to_field(self, config: DatasetConfig) -> str:
        """Render the key padded to the configured precision."""
        if self.length > config.precision:
            raise ValueError(
                f"Key {self.prefix!r} longer than precision {config.precision}"
            )
        self._check_symbols(self.prefix, config)
        return self.prefix.ljust(config.precision, config.sentinel)

    def is_full(self, config: DatasetConfig) -> bool:
        """Check if this key names a leaf cell at full precision."""
        return self.length == config.precision

    def covers(self, geocode: str) -> bool:
        """Check if a geohash lies inside the cell this key names."""
        return geocode.startswith(self.prefix)

    def is_ancestor_of(self, other: GeohashKey) -> bool:
        """Check if `other` names a strict sub-cell of this key."""
        return other.length > self.length and other.prefix.startswith(self.prefix)

    def parent(self) -> Optional[GeohashKey]:
        """Return the enclosing cell, or None for a top-level cell."""
        if self.length == 1:
            return None
        return GeohashKey(self.prefix[:-1])

    def children(self, config: DatasetConfig) -> List[GeohashKey]:
        """
        Subdivide into one child per alphabet symbol, in sort order.

        Raises:
            ValueError: If the key is already at full precision
        """
        if self.is_full(config):
            raise ValueError(f"Cannot subdivide full-precision key {self.prefix!r}")
        return [GeohashKey(self.prefix + c) for c in config.alphabet]

    @staticmethod
    def _check_symbols(prefix: str, config: DatasetConfig) -> None:
        for c in prefix:
            if c not in config.alphabet:
                raise ValueError(f"Invalid key character {c!r} in {prefix!r}")


@dataclass(frozen=True)
class IndexRecord:
    """One line of the record table: a key and a 1-based zone reference."""
    key: GeohashKey
    reference: int

    def __post_init__(self):
        if self.reference < 1:
            raise ValueError(f"reference must be at least 1, got {self.reference}")

    @classmethod
    def parse(cls, line: str, config: DatasetConfig) -> IndexRecord:
        """
        Parse a record line without its terminator.

        Args:
            line: `config.precision + config.reference_width` characters
            config: Dataset layout

        Returns:
            Parsed IndexRecord
        """
        if len(line) != config.precision + config.reference_width:
            raise ValueError(f"Record {line!r} has the wrong width")
        digits = line[config.precision:]
        if not digits.isdigit():
            raise ValueError(f"Record {line!r} has a non-numeric reference")
        key = GeohashKey.from_field(line[:config.precision], config)
        return cls(key, int(digits))

    def format(self, config: DatasetConfig) -> str:
        """Render the record line without its terminator."""
        if self.reference > config.max_reference:
            raise ValueError(
                f"reference {self.reference} does not fit in "
                f"{config.reference_width} digits"
            )
        return self.key.to_field(config) + str(self.reference).zfill(config.reference_width)
