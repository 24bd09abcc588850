"""
nmea_position.nmea

NMEA 0183 sentence validation, framing and GGA position decoding.
"""

from nmea_position.nmea.sentence import (
    build_sentence,
    nmea_checksum,
    split_fields,
    validate_sentence,
)
from nmea_position.nmea.reader import (
    LineSource,
    SentenceReader,
    TagFilter,
    TransportError,
)
from nmea_position.nmea.decoder import (
    DecodeAttempt,
    DecodeCancelled,
    PositionDecoder,
    Rejection,
)

__all__ = [
    "build_sentence",
    "nmea_checksum",
    "split_fields",
    "validate_sentence",
    "LineSource",
    "SentenceReader",
    "TagFilter",
    "TransportError",
    "DecodeAttempt",
    "DecodeCancelled",
    "PositionDecoder",
    "Rejection",
]
