"""
nmea/decoder.py

Turn a stream of GGA sentences into :class:`~nmea_position.position.Position`
readings.

Each decode attempt reads one GGA body and runs it through a sequence of
gates::

    TagFilter ─► corruption check ─► field count ─► numeric decode ─► Position

Any gate can reject the attempt.  :meth:`PositionDecoder.attempt` reports a
single outcome; :meth:`PositionDecoder.decode` keeps attempting until one
succeeds.

GGA field positions used (after the tag has been removed)
---------------------------------------------------------
=====  ==========================
Index  Meaning
=====  ==========================
1      Latitude (``ddmm.mmmm``)
2      Latitude hemisphere
3      Longitude (``dddmm.mmmm``)
4      Longitude hemisphere
8      Altitude above MSL (metres)
=====  ==========================
"""

from __future__ import annotations

import enum
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from nmea_position.nmea.reader import TagFilter, TransportError
from nmea_position.nmea.sentence import split_fields
from nmea_position.position import Position

logger = logging.getLogger(__name__)

POSITION_SENTENCE_ID = "GGA"
DEFAULT_TALKER_ID = "GP"

# Bodies shorter than this cannot hold every field the decoder reads.
MIN_FIELD_COUNT = 10

_LATITUDE_FIELD = 1
_LATITUDE_DIRECTION_FIELD = 2
_LONGITUDE_FIELD = 3
_LONGITUDE_DIRECTION_FIELD = 4
_ALTITUDE_FIELD = 8


class DecodeCancelled(Exception):
    """Raised when the cancellation check stops :meth:`PositionDecoder.decode`."""


class Rejection(enum.Enum):
    """Why a decode attempt produced no position."""

    NO_DATA = "no position data received"
    CORRUPT = "corrupt position data"
    FIELD_COUNT = "incorrect position field count"
    BAD_LATITUDE = "badly formatted latitude"
    BAD_LONGITUDE = "badly formatted longitude"
    BAD_ALTITUDE = "badly formatted altitude"


@dataclass(frozen=True)
class DecodeAttempt:
    """Outcome of one decode attempt: exactly one of the two is set."""

    position: Optional[Position] = None
    rejection: Optional[Rejection] = None

    @property
    def ok(self) -> bool:
        return self.position is not None


class PositionDecoder:
    """Decode positions from GGA sentences, retrying until one is valid.

    Args:
        tag_filter: Source of sentence bodies.
        talker_id: Two-character talker ID; the decoder asks for
            ``talker_id + "GGA"`` sentences.
        clock: Returns the current time in seconds since the epoch.
        log: Logger receiving one diagnostic per rejected attempt.
        should_cancel: Checked before every attempt; returning ``True``
            makes :meth:`decode` raise :class:`DecodeCancelled`.
        max_transport_failures: When set, this many consecutive attempts
            without data make :meth:`decode` raise :class:`TransportError`.
            ``None`` retries forever.

    Example::

        source = SerialLineSource.from_config(ReceiverConfig())
        decoder = PositionDecoder(TagFilter(SentenceReader(source)))
        print(decoder.decode().render())
    """

    def __init__(
        self,
        tag_filter: TagFilter,
        talker_id: str = DEFAULT_TALKER_ID,
        clock: Callable[[], float] = time.time,
        log: Optional[logging.Logger] = None,
        should_cancel: Optional[Callable[[], bool]] = None,
        max_transport_failures: Optional[int] = None,
    ) -> None:
        if len(talker_id) != 2:
            raise ValueError(f"talker_id must be 2 characters, got {talker_id!r}.")
        if max_transport_failures is not None and max_transport_failures < 1:
            raise ValueError(
                f"max_transport_failures must be positive, got {max_transport_failures}."
            )
        self._tag_filter = tag_filter
        self._tag = talker_id + POSITION_SENTENCE_ID
        self._clock = clock
        self._log = log if log is not None else logger
        self._should_cancel = should_cancel
        self._max_transport_failures = max_transport_failures

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def tag(self) -> str:
        """The sentence tag this decoder consumes, e.g. ``"GPGGA"``."""
        return self._tag

    def decode(self) -> Position:
        """Block until a valid position has been decoded and return it.

        Raises:
            DecodeCancelled: If the cancellation check fired.
            TransportError: If ``max_transport_failures`` consecutive
                attempts received no data.
        """
        failures = 0
        while True:
            if self._should_cancel is not None and self._should_cancel():
                raise DecodeCancelled(f"Cancelled while waiting for {self._tag}")

            result = self.attempt()
            if result.position is not None:
                return result.position

            self._log.warning("Rejected %s sentence: %s", self._tag, result.rejection.value)

            if result.rejection is Rejection.NO_DATA:
                failures += 1
                if (self._max_transport_failures is not None
                        and failures >= self._max_transport_failures):
                    raise TransportError(
                        f"No {self._tag} data after {failures} consecutive transport failures"
                    )
            else:
                failures = 0

    def attempt(self) -> DecodeAttempt:
        """Run a single read-and-decode cycle."""
        body = self._tag_filter.read_body_for_tag(self._tag)
        if body is None:
            return DecodeAttempt(rejection=Rejection.NO_DATA)
        return self.decode_body(body)

    def decode_body(self, body: str) -> DecodeAttempt:
        """Decode one GGA *body* (the text after ``"$GPGGA,"``)."""
        # A second sentence start means two sentences were run together.
        if "$" in body:
            return DecodeAttempt(rejection=Rejection.CORRUPT)

        fields = split_fields(body)
        if len(fields) < MIN_FIELD_COUNT:
            return DecodeAttempt(rejection=Rejection.FIELD_COUNT)

        latitude = _parse_coordinate(fields, _LATITUDE_FIELD, _LATITUDE_DIRECTION_FIELD)
        if latitude is None:
            return DecodeAttempt(rejection=Rejection.BAD_LATITUDE)

        longitude = _parse_coordinate(fields, _LONGITUDE_FIELD, _LONGITUDE_DIRECTION_FIELD)
        if longitude is None:
            return DecodeAttempt(rejection=Rejection.BAD_LONGITUDE)

        altitude = _parse_number(fields[_ALTITUDE_FIELD])
        if altitude is None:
            return DecodeAttempt(rejection=Rejection.BAD_ALTITUDE)

        return DecodeAttempt(position=Position(
            timestamp=int(self._clock()),
            latitude=latitude[0],
            latitude_direction=latitude[1],
            longitude=longitude[0],
            longitude_direction=longitude[1],
            altitude=altitude,
        ))


# ---------------------------------------------------------------------------
# Internal parsing helpers
# ---------------------------------------------------------------------------


def _parse_coordinate(
    fields: List[str], value_index: int, direction_index: int
) -> Optional[Tuple[float, str]]:
    """Return ``(value, hemisphere)`` or ``None`` if either is unusable."""
    value = _parse_number(fields[value_index])
    if value is None:
        return None
    direction = fields[direction_index]
    if not direction:
        return None
    return value, direction[0]


def _parse_number(text: str) -> Optional[float]:
    """Return *text* as a finite float, or ``None``.

    ``float()`` also accepts ``nan``, ``inf`` and digit separators such as
    ``1_0``; none of these are valid in an NMEA numeric field.
    """
    if "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value
