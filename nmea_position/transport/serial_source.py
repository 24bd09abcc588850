"""
transport/serial_source.py

Line source backed by a serial port, using pyserial.
"""

from __future__ import annotations

import logging
from typing import Optional

import serial

from nmea_position.config import ReceiverConfig
from nmea_position.nmea.reader import TransportError

logger = logging.getLogger(__name__)


class SerialLineSource:
    """Read NMEA lines from a serial port.

    Args:
        port: An open ``serial.Serial`` (or compatible) object.

    Example::

        with SerialLineSource.from_config(ReceiverConfig(port="/dev/ttyUSB0")) as source:
            line = source.next_line()
    """

    def __init__(self, port: serial.SerialBase) -> None:
        self._port = port

    @classmethod
    def from_config(cls, config: ReceiverConfig) -> "SerialLineSource":
        """Open the port described by *config*.

        Raises:
            TransportError: If the port cannot be opened.
        """
        logger.info("Opening GPS receiver on %s @ %d baud", config.port, config.baudrate)
        try:
            port = serial.serial_for_url(
                config.port,
                baudrate=config.baudrate,
                bytesize=config.bytesize,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=config.timeout,
            )
        except (serial.SerialException, ValueError) as exc:
            raise TransportError(f"Unable to open {config.port}: {exc}") from exc
        return cls(port)

    # ------------------------------------------------------------------
    # LineSource
    # ------------------------------------------------------------------

    def next_line(self) -> str:
        """Read one line, without its terminator.

        Returns an empty string when the read timed out.
        """
        try:
            raw = self._port.readline()
        except serial.SerialException as exc:
            raise TransportError(f"Serial read failed: {exc}") from exc
        return raw.decode("ascii", errors="replace").rstrip("\r\n")

    # ------------------------------------------------------------------
    # Resource management
    # ------------------------------------------------------------------

    def close(self) -> None:
        if self._port.is_open:
            self._port.close()
            logger.info("GPS receiver port closed")

    @property
    def is_open(self) -> bool:
        return bool(self._port.is_open)

    def __enter__(self) -> "SerialLineSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None
