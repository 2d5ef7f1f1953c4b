"""
Dataset layout configuration.

The record table is a sorted sequence of fixed-width lines:

    <key field: precision chars><reference: reference_width digits>\\n

Key fields shorter than the precision are right-padded with the sentinel,
which must sort below every alphabet symbol.
"""

from dataclasses import dataclass


BASE32 = "0123456789bcdefghjkmnpqrstuvwxyz"
SENTINEL = "-"

DEFAULT_RECORDS_RESOURCE = "TZ.dat.gz"
DEFAULT_NAMES_RESOURCE = "TZL.dat.gz"


@dataclass(frozen=True)
class DatasetConfig:
    """Layout of the record and zone name tables."""

    precision: int = 5
    """Geohash length used for lookups and width of the key field."""

    reference_width: int = 3
    """Number of zero-padded decimal digits in the reference field."""

    sentinel: str = SENTINEL
    """Padding character for keys shorter than the precision."""

    alphabet: str = BASE32
    """Symbols a key field may contain, in geohash order."""

    records_resource: str = DEFAULT_RECORDS_RESOURCE
    """Packaged record table asset name."""

    names_resource: str = DEFAULT_NAMES_RESOURCE
    """Packaged zone name asset name."""

    def __post_init__(self):
        if self.precision < 1:
            raise ValueError("precision must be at least 1")
        if self.reference_width < 1:
            raise ValueError("reference_width must be at least 1")
        if len(self.sentinel) != 1:
            raise ValueError("sentinel must be a single character")
        size = len(self.alphabet)
        if size < 2 or size & (size - 1):
            raise ValueError("alphabet size must be a power of two, at least 2")
        if len(set(self.alphabet)) != size:
            raise ValueError("alphabet symbols must be unique")
        if list(self.alphabet) != sorted(self.alphabet):
            raise ValueError("alphabet symbols must be in ascending order")
        if self.sentinel in self.alphabet or self.sentinel >= min(self.alphabet):
            raise ValueError(
                f"sentinel {self.sentinel!r} must sort below every alphabet symbol"
            )
        if not (self.sentinel + self.alphabet).isascii():
            raise ValueError("key fields must be ASCII")

    @property
    def record_width(self) -> int:
        """Bytes per record, including the newline terminator."""
        return self.precision + self.reference_width + 1

    @property
    def bits_per_symbol(self) -> int:
        """Bisection steps packed into one key character."""
        return len(self.alphabet).bit_length() - 1

    @property
    def max_reference(self) -> int:
        """Largest reference the reference field can hold."""
        return 10 ** self.reference_width - 1
