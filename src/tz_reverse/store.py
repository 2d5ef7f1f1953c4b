"""
Fixed-width record table access.

The record table is decompressed once into an immutable bytes buffer and
read by slicing, so concurrent line reads need no locking. Only the
one-time load is guarded.
"""

import gzip
import logging
import threading
import zlib
from importlib import resources
from typing import BinaryIO, Optional, Union

from .config import DatasetConfig
from .exceptions import DatasetLoadError, RecordIndexError
from .records import GeohashKey, IndexRecord


logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"

AssetSource = Union[BinaryIO, bytes, bytearray, memoryview, None]


def read_source(source: AssetSource) -> Optional[bytes]:
    """
    Take a snapshot of a caller-supplied asset.

    Streams are read to the end immediately so the caller may close them
    after construction; decompression is left for the first lookup.

    Args:
        source: Binary stream, raw bytes, or None for the packaged asset

    Returns:
        Raw (possibly compressed) bytes, or None for the packaged asset
    """
    if source is None:
        return None
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    try:
        data = source.read()
    except OSError as e:
        raise DatasetLoadError(f"Could not read dataset stream: {e}") from e
    if not isinstance(data, (bytes, bytearray)):
        raise DatasetLoadError("Dataset stream must be opened in binary mode")
    return bytes(data)


def decode_asset(raw: Optional[bytes], resource: str) -> bytes:
    """
    Produce the uncompressed bytes of an asset.

    Args:
        raw: Bytes from read_source, or None to load the packaged resource
        resource: Name of the packaged resource under tz_reverse/data

    Returns:
        Uncompressed asset bytes
    """
    if raw is None:
        try:
            raw = (resources.files("tz_reverse") / "data" / resource).read_bytes()
        except (FileNotFoundError, OSError) as e:
            raise DatasetLoadError(f"Packaged dataset {resource!r} not found") from e

    if raw[:2] == GZIP_MAGIC:
        try:
            return gzip.decompress(raw)
        except (OSError, EOFError, zlib.error) as e:
            raise DatasetLoadError(f"Corrupt gzip data in {resource!r}: {e}") from e
    return raw


class RecordStore:
    """
    Random access to the lines of the record table by 1-based index.
    """

    def __init__(self, source: AssetSource = None, config: Optional[DatasetConfig] = None):
        """
        Args:
            source: Record table as a binary stream or bytes (gzip or plain);
                None loads the packaged table
            config: Dataset layout (default: DatasetConfig())
        """
        self.config = config or DatasetConfig()
        self._raw = read_source(source)
        self._data: Optional[bytes] = None
        self._count = 0
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        """True once the table has been decompressed."""
        return self._data is not None

    def load(self) -> None:
        """Decompress and validate the table if that has not happened yet."""
        self._buffer()

    def _buffer(self) -> bytes:
        data = self._data
        if data is None:
            with self._lock:
                if self._data is None:
                    buffer = self._decode()
                    self._count = len(buffer) // self.config.record_width
                    self._data = buffer
                    self._raw = None
                data = self._data
        return data

    def _decode(self) -> bytes:
        """Load the buffer and check it against the configured layout."""
        buffer = decode_asset(self._raw, self.config.records_resource)
        width = self.config.record_width

        if len(buffer) % width != 0:
            raise DatasetLoadError(
                f"Record table size {len(buffer)} is not a multiple of "
                f"record width {width}"
            )
        # Every record must end exactly at its terminator
        if buffer[width - 1::width].strip(b"\n"):
            raise DatasetLoadError("Record table has a misaligned line terminator")
        if not buffer.isascii():
            raise DatasetLoadError("Record table contains non-ASCII bytes")

        logger.debug(
            "Loaded record table: %d records, %d bytes", len(buffer) // width, len(buffer)
        )
        return buffer

    def line_count(self) -> int:
        """Number of records in the table."""
        self._buffer()
        return self._count

    def __len__(self) -> int:
        return self.line_count()

    def line(self, index: int) -> str:
        """
        Read one record without its terminator.

        Args:
            index: 1-based line number

        Returns:
            Key field followed by the reference field
        """
        data = self._buffer()
        if not 1 <= index <= self._count:
            raise RecordIndexError(
                f"Line {index} outside record table [1, {self._count}]"
            )
        start = (index - 1) * self.config.record_width
        return data[start:start + self.config.record_width - 1].decode("ascii")

    def key(self, index: int) -> str:
        """Raw, possibly sentinel-padded key field of a line."""
        return self.line(index)[:self.config.precision]

    def geohash_key(self, index: int) -> GeohashKey:
        """Key field of a line as a GeohashKey, padding stripped."""
        field = self.key(index)
        try:
            return GeohashKey.from_field(field, self.config)
        except ValueError as e:
            raise DatasetLoadError(f"Line {index} has a malformed key {field!r}") from e

    def reference(self, index: int) -> int:
        """Zone reference of a line."""
        digits = self.line(index)[self.config.precision:]
        try:
            return int(digits)
        except ValueError as e:
            raise DatasetLoadError(f"Line {index} has a non-numeric reference {digits!r}") from e

    def record(self, index: int) -> IndexRecord:
        """Parse a line into an IndexRecord."""
        return IndexRecord.parse(self.line(index), self.config)

    def find_sort_violation(self) -> Optional[int]:
        """
        Check the table ordering the search relies on.

        Returns:
            First line whose key sorts below the key before it, or None
            if the table is sorted
        """
        previous = None
        for index in range(1, self.line_count() + 1):
            key = self.key(index)
            if previous is not None and key < previous:
                return index
            previous = key
        return None
