"""
transport/stream_source.py

Line sources over in-memory text and recorded NMEA log files.  Useful for
replaying captured data and as test doubles.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator, Optional

from nmea_position.nmea.reader import TransportError


class StreamLineSource:
    """Serve lines from any iterable of strings.

    Line terminators are stripped.  Once the iterable is exhausted every
    call raises :class:`TransportError`.

    Args:
        lines: Iterable of text lines.
    """

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines: Iterator[str] = iter(lines)
        self._exhausted = False

    def next_line(self) -> str:
        if self._exhausted:
            raise TransportError("End of stream")
        try:
            line = next(self._lines)
        except StopIteration:
            self._exhausted = True
            raise TransportError("End of stream") from None
        return line.rstrip("\r\n")

    @property
    def exhausted(self) -> bool:
        return self._exhausted


class FileLineSource(StreamLineSource):
    """Replay a recorded NMEA log file line by line.

    Args:
        path: Path to the ``.nmea`` or ``.txt`` log.
    """

    def __init__(self, path: str | os.PathLike) -> None:
        self._path = Path(path)
        if not self._path.exists():
            raise FileNotFoundError(f"NMEA file not found: {self._path}")
        self._file = self._path.open("r", encoding="ascii", errors="replace", newline="")
        super().__init__(self._file)

    @property
    def path(self) -> Path:
        return self._path

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> "FileLineSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None
