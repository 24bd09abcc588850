"""
app.py

Polling driver: read a position once per interval and print it.

Usage::

    nmea-position --port /dev/ttyUSB0 --count 10
    nmea-position --replay drive.nmea -v
    nmea-position --config receiver.yaml
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import time
from typing import Callable, List, Optional, Sequence

from nmea_position.config import ReceiverConfig
from nmea_position.nmea.decoder import DecodeCancelled, PositionDecoder
from nmea_position.nmea.reader import LineSource, SentenceReader, TagFilter, TransportError
from nmea_position.position import Position
from nmea_position.transport import FileLineSource, SerialLineSource

logger = logging.getLogger(__name__)


def build_decoder(
    source: LineSource,
    config: ReceiverConfig,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> PositionDecoder:
    """Wire *source* through the reader, tag filter and decoder."""
    return PositionDecoder(
        TagFilter(SentenceReader(source)),
        talker_id=config.talker_id,
        should_cancel=should_cancel,
        max_transport_failures=config.max_transport_failures,
    )


def run(
    decoder: PositionDecoder,
    count: Optional[int] = None,
    interval: float = 1.0,
    emit: Callable[[str], None] = print,
    sleep: Callable[[float], None] = time.sleep,
) -> List[Position]:
    """Decode *count* positions (forever if ``None``), one per *interval*.

    Each reading is emitted as its rendered text followed by a blank line.

    Returns:
        The positions read, in order.
    """
    positions: List[Position] = []
    while count is None or len(positions) < count:
        position = decoder.decode()
        positions.append(position)
        emit(position.render() + "\n")
        if count is None or len(positions) < count:
            sleep(interval)
    return positions


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="nmea-position",
        description="Print GPS positions decoded from NMEA GGA sentences.",
    )
    parser.add_argument("--config", help="YAML receiver configuration file")
    parser.add_argument("--port", help="serial port or pyserial URL")
    parser.add_argument("--baudrate", type=int, help="line speed in baud")
    parser.add_argument("--replay", metavar="FILE", help="replay a recorded NMEA log instead of a port")
    parser.add_argument("--count", type=int, help="stop after this many readings")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> ReceiverConfig:
    config = ReceiverConfig.from_yaml(args.config) if args.config else ReceiverConfig()
    overrides = {}
    if args.port is not None:
        overrides["port"] = args.port
    if args.baudrate is not None:
        overrides["baudrate"] = args.baudrate
    if args.replay is not None and config.max_transport_failures is None:
        # A finished log would otherwise be retried forever.
        overrides["max_transport_failures"] = 1
    return dataclasses.replace(config, **overrides)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _load_config(args)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    try:
        if args.replay:
            source = FileLineSource(args.replay)
            interval = 0.0
        else:
            source = SerialLineSource.from_config(config)
            interval = config.poll_interval
    except (FileNotFoundError, TransportError) as exc:
        logger.error("Unable to open position source: %s", exc)
        return 1

    with source:
        decoder = build_decoder(source, config)
        try:
            run(decoder, count=args.count, interval=interval)
        except TransportError as exc:
            if args.replay:
                logger.info("End of replay: %s", exc)
                return 0
            logger.error("Transport failure: %s", exc)
            return 1
        except (DecodeCancelled, KeyboardInterrupt):
            logger.info("Stopped")
            return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
