"""
nmea_position: Decode GPS position fixes from NMEA 0183 GGA sentences,
with checksum validation, retrying decode and DMS display formatting.
"""

from nmea_position.position import Position, positions_to_array, to_dms
from nmea_position.config import ReceiverConfig
from nmea_position import nmea
from nmea_position import transport

__all__ = [
    "Position",
    "positions_to_array",
    "to_dms",
    "ReceiverConfig",
    "nmea",
    "transport",
]
