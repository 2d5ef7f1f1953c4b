"""Zone name table: line i holds the zone id for reference i."""

import logging
import threading
from typing import Optional, Tuple

from .config import DEFAULT_NAMES_RESOURCE
from .exceptions import DatasetLoadError, RecordIndexError
from .store import AssetSource, decode_asset, read_source


logger = logging.getLogger(__name__)


class ZoneNameTable:
    """Immutable, 1-indexed list of IANA zone ids."""

    def __init__(self, source: AssetSource = None, resource: str = DEFAULT_NAMES_RESOURCE):
        """
        Args:
            source: Newline-delimited zone ids as a binary stream or bytes
                (gzip or plain); None loads the packaged table
            resource: Packaged asset name used when source is None
        """
        self.resource = resource
        self._raw = read_source(source)
        self._names: Optional[Tuple[str, ...]] = None
        self._lock = threading.Lock()

    def _table(self) -> Tuple[str, ...]:
        names = self._names
        if names is None:
            with self._lock:
                if self._names is None:
                    self._names = self._decode()
                    self._raw = None
                names = self._names
        return names

    def _decode(self) -> Tuple[str, ...]:
        data = decode_asset(self._raw, self.resource)
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DatasetLoadError(f"Zone name table is not valid UTF-8: {e}") from e

        names = tuple(line.rstrip("\r") for line in text.split("\n"))
        if names and names[-1] == "":
            names = names[:-1]
        if any(not name for name in names):
            raise DatasetLoadError("Zone name table contains an empty entry")

        logger.debug("Loaded zone name table: %d zones", len(names))
        return names

    def load(self) -> None:
        """Decode the table if that has not happened yet."""
        self._table()

    def __len__(self) -> int:
        return len(self._table())

    def name(self, reference: int) -> str:
        """
        Look up the zone id for a reference.

        Args:
            reference: 1-based line number into the table

        Returns:
            IANA zone id
        """
        names = self._table()
        if not 1 <= reference <= len(names):
            raise RecordIndexError(
                f"Zone reference {reference} outside name table [1, {len(names)}]"
            )
        return names[reference - 1]
