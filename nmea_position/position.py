"""
position.py

The decoded position reading and its degrees/minutes/seconds rendering.

Coordinates are kept exactly as the receiver transmits them: latitude in
``ddmm.mmmm`` layout and longitude in ``dddmm.mmmm`` layout, with the
hemisphere held separately as a single character.  :func:`to_dms` turns such
a raw value into a display string.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Iterable

import numpy as np

# ---------------------------------------------------------------------------
# Structured dtype
# ---------------------------------------------------------------------------

POSITION_DTYPE = np.dtype([
    ("timestamp", np.int64),
    ("latitude", np.float64),
    ("latitude_direction", "U1"),
    ("longitude", np.float64),
    ("longitude_direction", "U1"),
    ("altitude", np.float64),
])


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def to_dms(raw: float) -> str:
    """Convert a raw NMEA coordinate into a degrees/minutes/seconds string.

    The arithmetic is::

        degrees   = floor(raw / 100)
        remainder = (raw / 100 - degrees) / 0.60
        minutes   = floor(remainder * 60)
        seconds   = (remainder * 60 - minutes) * 60

    Example::

        >>> to_dms(5144.3855)
        '51° 44\\' 23.1" '

    The trailing space is part of the format.  Seconds are rounded with
    Python's ``:.1f``, which rounds the exact binary value; a value lying
    on a decimal half-step can round down where a half-up formatter would
    round up.
    """
    degree_value = raw / 100
    degrees = math.floor(degree_value)
    remainder = (degree_value - degrees) / 0.60
    minute_value = remainder * 60
    minutes = math.floor(minute_value)
    seconds = (minute_value - minutes) * 60
    return f"{degrees}° {minutes}' {seconds:.1f}\" "


# ---------------------------------------------------------------------------
# Data class
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Position:
    """A single position reading.

    Attributes:
        timestamp: Wall-clock time of the decode, in whole seconds since the
            epoch.  The sentence's own time-of-fix field is not used.
        latitude: Raw latitude in ``ddmm.mmmm`` layout.
        latitude_direction: ``'N'`` or ``'S'``.
        longitude: Raw longitude in ``dddmm.mmmm`` layout.
        longitude_direction: ``'E'`` or ``'W'``.
        altitude: Metres above mean sea level.
    """

    timestamp: int
    latitude: float
    latitude_direction: str
    longitude: float
    longitude_direction: str
    altitude: float

    def render(self) -> str:
        """Return a four-line human-readable summary."""
        return (
            f"Timestamp: {self.timestamp}\n"
            f"Latitude: {to_dms(self.latitude)}{self.latitude_direction}\n"
            f"Longitude: {to_dms(self.longitude)}{self.longitude_direction}\n"
            f"Altitude: {self.altitude:.2f} meters"
        )

    def __str__(self) -> str:
        return self.render()

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Position":
        return cls(
            timestamp=int(data["timestamp"]),
            latitude=float(data["latitude"]),
            latitude_direction=str(data["latitude_direction"]),
            longitude=float(data["longitude"]),
            longitude_direction=str(data["longitude_direction"]),
            altitude=float(data["altitude"]),
        )


# ---------------------------------------------------------------------------
# Module-level convenience function
# ---------------------------------------------------------------------------


def positions_to_array(positions: Iterable[Position]) -> np.ndarray:
    """Pack a batch of readings into a structured array of :data:`POSITION_DTYPE`."""
    rows = [
        (p.timestamp, p.latitude, p.latitude_direction,
         p.longitude, p.longitude_direction, p.altitude)
        for p in positions
    ]
    return np.array(rows, dtype=POSITION_DTYPE)
