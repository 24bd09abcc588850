"""Tests for the pyserial-backed line source."""

import pytest
import serial

from nmea_position.config import ReceiverConfig
from nmea_position.nmea.reader import SentenceReader, TransportError
from nmea_position.transport import SerialLineSource

_GGA = "$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47"


class _BrokenPort:
    is_open = True

    def readline(self):
        raise serial.SerialException("device reports readiness to read but returned no data")

    def close(self):
        self.is_open = False


class TestSerialLineSource:
    def setup_method(self):
        self.port = serial.serial_for_url("loop://", timeout=0.1)

    def teardown_method(self):
        if self.port.is_open:
            self.port.close()

    def test_reads_line_without_terminator(self):
        self.port.write((_GGA + "\r\n").encode("ascii"))
        assert SerialLineSource(self.port).next_line() == _GGA

    def test_reads_lines_in_order(self):
        self.port.write(b"first\r\nsecond\n")
        source = SerialLineSource(self.port)
        assert source.next_line() == "first"
        assert source.next_line() == "second"

    def test_timeout_returns_empty_string(self):
        assert SerialLineSource(self.port).next_line() == ""

    def test_undecodable_bytes_replaced(self):
        self.port.write(b"$GP\xff\r\n")
        assert SerialLineSource(self.port).next_line() == "$GP�"

    def test_feeds_sentence_reader(self):
        self.port.write(b"noise\r\n" + (_GGA + "\r\n").encode("ascii"))
        reader = SentenceReader(SerialLineSource(self.port))
        assert reader.next_sentence() == _GGA

    def test_close(self):
        source = SerialLineSource(self.port)
        assert source.is_open
        source.close()
        assert not source.is_open

    def test_context_manager_closes(self):
        with SerialLineSource(self.port) as source:
            assert source.is_open
        assert not self.port.is_open

    def test_serial_exception_becomes_transport_error(self):
        with pytest.raises(TransportError):
            SerialLineSource(_BrokenPort()).next_line()


class TestFromConfig:
    def test_opens_url(self):
        config = ReceiverConfig(port="loop://", baudrate=4800, timeout=0.1)
        with SerialLineSource.from_config(config) as source:
            assert source.is_open
            assert source.next_line() == ""

    def test_unknown_url_raises_transport_error(self):
        with pytest.raises(TransportError):
            SerialLineSource.from_config(ReceiverConfig(port="bogus://nowhere"))
