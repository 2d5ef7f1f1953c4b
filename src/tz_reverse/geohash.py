"""
Geohash encoding for converting WGS84 coordinates to fixed-length cell codes.

A geohash is built by repeatedly bisecting the longitude and latitude
intervals, alternating axis per bit and starting with longitude:
- bit = 1 if the coordinate lies in the upper half (midpoint included)
- bit = 0 otherwise
Every 5 bits are packed, most significant first, into one base-32 symbol.
Other power-of-two alphabets pack log2(len(alphabet)) bits per symbol, so
a binary alphabet "01" spends one bisection per character.

The same encoding is used when the record table is built and when it is
queried, so a code at precision p is always a prefix of the code at any
precision above p.
"""

import math
from typing import Tuple

from .config import BASE32, SENTINEL
from .exceptions import InvalidCoordinateError


def _masks(alphabet: str) -> Tuple[int, ...]:
    """Bit masks for one symbol, most significant first."""
    size = len(alphabet)
    if size < 2 or size & (size - 1):
        raise ValueError(f"alphabet size {size} is not a power of two")
    bits = size.bit_length() - 1
    return tuple(1 << i for i in range(bits - 1, -1, -1))


def validate_coords(lat: float, lon: float) -> None:
    """
    Check that latitude and longitude are inside the WGS84 ranges.

    Out-of-range values are rejected rather than clamped.

    Args:
        lat: Latitude in degrees
        lon: Longitude in degrees

    Raises:
        InvalidCoordinateError: If either value is NaN or out of range
    """
    if math.isnan(lat) or not -90.0 <= lat <= 90.0:
        raise InvalidCoordinateError(f"latitude {lat!r} outside [-90, 90]")
    if math.isnan(lon) or not -180.0 <= lon <= 180.0:
        raise InvalidCoordinateError(f"longitude {lon!r} outside [-180, 180]")


def encode(lat: float, lon: float, precision: int = 5, alphabet: str = BASE32) -> str:
    """
    Encode WGS84 coordinates as a geohash.

    Args:
        lat: Latitude in degrees [-90, 90]
        lon: Longitude in degrees [-180, 180]
        precision: Number of symbols to produce
        alphabet: Symbols in bit-value order; its size must be a power of two

    Returns:
        Geohash string of exactly `precision` characters
    """
    if precision < 1:
        raise ValueError("precision must be at least 1")
    masks = _masks(alphabet)
    validate_coords(lat, lon)

    lat_min, lat_max = -90.0, 90.0
    lon_min, lon_max = -180.0, 180.0

    out = []
    even = True  # longitude first
    while len(out) < precision:
        ch = 0
        for mask in masks:
            if even:
                mid = (lon_min + lon_max) / 2.0
                if lon >= mid:
                    ch |= mask
                    lon_min = mid
                else:
                    lon_max = mid
            else:
                mid = (lat_min + lat_max) / 2.0
                if lat >= mid:
                    ch |= mask
                    lat_min = mid
                else:
                    lat_max = mid
            even = not even
        out.append(alphabet[ch])

    return "".join(out)


def decode_bbox(geohash: str, alphabet: str = BASE32) -> Tuple[float, float, float, float]:
    """
    Return the bounding box of the cell a geohash (or padded key) names.

    Decoding stops at the first sentinel, so a short key field such as
    "9q---" decodes to the box of "9q".

    Args:
        geohash: Geohash string, optionally sentinel-padded
        alphabet: Symbols the geohash was encoded with

    Returns:
        Tuple of (lat_min, lat_max, lon_min, lon_max)
    """
    masks = _masks(alphabet)
    lat_min, lat_max = -90.0, 90.0
    lon_min, lon_max = -180.0, 180.0
    even = True

    for c in geohash:
        if c == SENTINEL:
            break
        cd = alphabet.find(c)
        if cd < 0:
            raise ValueError(f"Invalid geohash character: {c!r}")

        for mask in masks:
            if even:
                mid = (lon_min + lon_max) / 2.0
                if cd & mask:
                    lon_min = mid
                else:
                    lon_max = mid
            else:
                mid = (lat_min + lat_max) / 2.0
                if cd & mask:
                    lat_min = mid
                else:
                    lat_max = mid
            even = not even

    return lat_min, lat_max, lon_min, lon_max


def decode(geohash: str, alphabet: str = BASE32) -> Tuple[float, float]:
    """
    Return the center of the cell a geohash names.

    Args:
        geohash: Geohash string, optionally sentinel-padded
        alphabet: Symbols the geohash was encoded with

    Returns:
        Tuple of (lat, lon) in degrees
    """
    lat_min, lat_max, lon_min, lon_max = decode_bbox(geohash, alphabet)
    return (lat_min + lat_max) / 2.0, (lon_min + lon_max) / 2.0
