"""
Nominal time zone from longitude alone.

Used when no record covers a point (open ocean). The globe is cut into
15 degree bands centered on multiples of 15 degrees; the band around the
prime meridian is UTC. Zone ids follow the POSIX Etc/GMT convention, where
the sign is inverted: a point west of Greenwich gets Etc/GMT+N.
"""

import math


BAND_HALF_WIDTH = 7.5
DEGREES_PER_HOUR = 15.0


def offset_hours(longitude: float) -> int:
    """
    Nominal UTC offset in hours, east positive.

    Args:
        longitude: Longitude in degrees

    Returns:
        Whole hours in [-12, 12]
    """
    distance = abs(longitude)
    if distance <= BAND_HALF_WIDTH:
        return 0
    hours = math.ceil((distance - BAND_HALF_WIDTH) / DEGREES_PER_HOUR)
    return -hours if longitude < 0 else hours


def zone_id_for_offset(hours: int) -> str:
    """Render an offset as UTC or an Etc/GMT zone id."""
    if hours == 0:
        return "UTC"
    # Etc/GMT signs are inverted relative to the UTC offset
    sign = "-" if hours > 0 else "+"
    return f"Etc/GMT{sign}{abs(hours)}"


def resolve(longitude: float) -> str:
    """
    Fallback zone id for a longitude.

    Args:
        longitude: Longitude in degrees

    Returns:
        "UTC" within 7.5 degrees of the prime meridian, otherwise an
        Etc/GMT zone id
    """
    return zone_id_for_offset(offset_hours(longitude))
