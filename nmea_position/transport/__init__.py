"""
nmea_position.transport

Line sources feeding the sentence reader.
"""

from nmea_position.transport.serial_source import SerialLineSource
from nmea_position.transport.stream_source import FileLineSource, StreamLineSource

__all__ = [
    "SerialLineSource",
    "StreamLineSource",
    "FileLineSource",
]
