"""Tests for the GGA position decoder."""

import logging

import pytest

from nmea_position.nmea.decoder import (
    DecodeAttempt,
    DecodeCancelled,
    PositionDecoder,
    Rejection,
)
from nmea_position.nmea.reader import SentenceReader, TagFilter, TransportError
from nmea_position.nmea.sentence import build_sentence
from nmea_position.position import Position
from nmea_position.transport import StreamLineSource


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_FIELDS = ["123519", "4807.038", "N", "01131.000", "E", "1", "08", "0.9",
           "545.4", "M", "46.9", "M", "", ""]
_GGA = "$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47"
_RMC = "$GPRMC,092750.000,A,5321.6802,N,00630.3372,W,0.02,31.66,280511,,,A*43"


def _gga(**replacements) -> str:
    """Build a checksum-correct GGA sentence with some fields replaced."""
    fields = list(_FIELDS)
    for index, value in replacements.items():
        fields[int(index.lstrip("f"))] = value
    return build_sentence("GPGGA", fields)


def _decoder(lines, **kwargs) -> PositionDecoder:
    kwargs.setdefault("clock", lambda: 1700000000.75)
    return PositionDecoder(TagFilter(SentenceReader(StreamLineSource(lines))), **kwargs)


class _Countdown:
    """Cancellation check that fires after *n* attempts."""

    def __init__(self, n):
        self.remaining = n

    def __call__(self):
        if self.remaining <= 0:
            return True
        self.remaining -= 1
        return False


# ---------------------------------------------------------------------------
# Single attempts
# ---------------------------------------------------------------------------


class TestDecodeBody:
    def setup_method(self):
        self.decoder = _decoder([])

    def test_valid_body(self):
        result = self.decoder.decode_body(",".join(_FIELDS))
        assert result.ok
        assert result.rejection is None
        pos = result.position
        assert pos.latitude == pytest.approx(4807.038)
        assert pos.latitude_direction == "N"
        assert pos.longitude == pytest.approx(1131.0)
        assert pos.longitude_direction == "E"
        assert pos.altitude == pytest.approx(545.4)

    def test_timestamp_from_clock_in_whole_seconds(self):
        result = self.decoder.decode_body(",".join(_FIELDS))
        assert result.position.timestamp == 1700000000

    def test_embedded_sentence_is_corrupt(self):
        body = "123519,4807.038,N,$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,,"
        assert self.decoder.decode_body(body).rejection is Rejection.CORRUPT

    def test_too_few_fields(self):
        body = ",".join(_FIELDS[:9])
        assert body.count(",") == 8
        assert self.decoder.decode_body(body).rejection is Rejection.FIELD_COUNT

    def test_exactly_ten_fields_accepted(self):
        body = ",".join(_FIELDS[:10]) + ","
        assert self.decoder.decode_body(body).ok

    def test_non_numeric_latitude(self):
        fields = list(_FIELDS)
        fields[1] = "ABCD"
        result = self.decoder.decode_body(",".join(fields))
        assert result.position is None
        assert result.rejection is Rejection.BAD_LATITUDE

    def test_non_numeric_longitude(self):
        fields = list(_FIELDS)
        fields[3] = "east"
        assert self.decoder.decode_body(",".join(fields)).rejection is Rejection.BAD_LONGITUDE

    def test_empty_altitude(self):
        fields = list(_FIELDS)
        fields[8] = ""
        assert self.decoder.decode_body(",".join(fields)).rejection is Rejection.BAD_ALTITUDE

    def test_empty_direction_rejected(self):
        fields = list(_FIELDS)
        fields[2] = ""
        assert self.decoder.decode_body(",".join(fields)).rejection is Rejection.BAD_LATITUDE

    def test_direction_uses_first_character(self):
        fields = list(_FIELDS)
        fields[4] = "West"
        assert self.decoder.decode_body(",".join(fields)).position.longitude_direction == "W"

    @pytest.mark.parametrize("value", ["nan", "NaN", "inf", "-Infinity", "1_0"])
    @pytest.mark.parametrize("index, rejection", [
        (1, Rejection.BAD_LATITUDE),
        (3, Rejection.BAD_LONGITUDE),
        (8, Rejection.BAD_ALTITUDE),
    ])
    def test_non_finite_and_separator_numbers_rejected(self, value, index, rejection):
        fields = list(_FIELDS)
        fields[index] = value
        assert self.decoder.decode_body(",".join(fields)).rejection is rejection

    def test_decode_is_deterministic(self):
        body = ",".join(_FIELDS)
        first = self.decoder.decode_body(body).position
        second = self.decoder.decode_body(body).position
        assert (first.latitude, first.longitude, first.altitude) == (
            second.latitude, second.longitude, second.altitude)


class TestAttempt:
    def test_no_data_when_transport_fails(self):
        result = _decoder([]).attempt()
        assert result == DecodeAttempt(rejection=Rejection.NO_DATA)

    def test_attempt_consumes_one_gga(self):
        decoder = _decoder([_RMC, _gga(f1="ABCD"), _GGA])
        assert decoder.attempt().rejection is Rejection.BAD_LATITUDE
        assert decoder.attempt().ok


# ---------------------------------------------------------------------------
# Retry loop
# ---------------------------------------------------------------------------


class TestDecode:
    def test_valid_sentence(self):
        pos = _decoder([_GGA]).decode()
        assert isinstance(pos, Position)
        assert pos.latitude == pytest.approx(4807.038)
        assert pos.longitude_direction == "E"

    def test_bad_checksum_skipped(self):
        pos = _decoder([_GGA[:-2] + "00", _gga(f8="100.0")]).decode()
        assert pos.altitude == pytest.approx(100.0)

    def test_short_sentence_retried(self, caplog):
        short = build_sentence("GPGGA", _FIELDS[:8])
        with caplog.at_level(logging.WARNING):
            pos = _decoder([short, _GGA]).decode()
        assert pos.altitude == pytest.approx(545.4)
        assert "incorrect position field count" in caplog.text

    def test_non_numeric_latitude_retried(self, caplog):
        with caplog.at_level(logging.WARNING):
            pos = _decoder([_gga(f1="ABCD"), _gga(f1="5144.3855")]).decode()
        assert pos.latitude == pytest.approx(5144.3855)
        assert "badly formatted latitude" in caplog.text

    def test_one_warning_per_rejection(self, caplog):
        lines = [_gga(f1="x"), _gga(f3="y"), _gga(f8="z"), _GGA]
        with caplog.at_level(logging.WARNING):
            _decoder(lines).decode()
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 3

    def test_injected_logger(self, caplog):
        log = logging.getLogger("test.injected")
        with caplog.at_level(logging.WARNING, logger="test.injected"):
            _decoder([_gga(f1="x"), _GGA], log=log).decode()
        assert any(r.name == "test.injected" for r in caplog.records)

    def test_other_talker_id(self):
        gn = build_sentence("GNGGA", _gga(f8="12.5")[7:-3].split(","))
        decoder = _decoder([_GGA, gn], talker_id="GN")
        assert decoder.tag == "GNGGA"
        assert decoder.decode().altitude == pytest.approx(12.5)

    def test_nan_latitude_retried_and_renders(self):
        pos = _decoder([_gga(f1="nan"), _gga(f1="inf"), _GGA]).decode()
        assert pos.latitude == pytest.approx(4807.038)
        assert "Latitude: 48° 7' 2.3\" N" in pos.render()

    def test_cancel_before_first_attempt(self):
        with pytest.raises(DecodeCancelled):
            _decoder([_GGA], should_cancel=lambda: True).decode()

    def test_cancel_bounds_transport_retries(self):
        with pytest.raises(DecodeCancelled):
            _decoder([], should_cancel=_Countdown(5)).decode()

    def test_max_transport_failures_raises(self):
        with pytest.raises(TransportError):
            _decoder([_gga(f1="x")], max_transport_failures=3).decode()

    def test_invalid_talker_id(self):
        with pytest.raises(ValueError):
            _decoder([], talker_id="GPS")

    def test_invalid_max_transport_failures(self):
        with pytest.raises(ValueError):
            _decoder([], max_transport_failures=0)
