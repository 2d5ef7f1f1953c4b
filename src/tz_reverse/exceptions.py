"""Errors raised by tz-reverse."""


class TzReverseError(Exception):
    """Base class for all tz-reverse errors."""


class InvalidCoordinateError(TzReverseError, ValueError):
    """Latitude or longitude outside the valid WGS84 range."""


class RecordIndexError(TzReverseError, IndexError):
    """Line number or zone reference outside the loaded table."""


class DatasetLoadError(TzReverseError, RuntimeError):
    """A data asset is missing, corrupt, or does not match the configured layout."""
