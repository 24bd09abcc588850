"""
nmea/reader.py

Sentence framing on top of a line-oriented transport.

:class:`SentenceReader` pulls raw lines from a :class:`LineSource` until one
passes :func:`~nmea_position.nmea.sentence.validate_sentence`.
:class:`TagFilter` sits on top of it and keeps reading until a sentence with
the requested tag arrives, returning that sentence's body.

Lines are consumed strictly in arrival order, one at a time.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, runtime_checkable

from nmea_position.nmea.sentence import sentence_body, sentence_tag, validate_sentence

logger = logging.getLogger(__name__)


class TransportError(OSError):
    """Raised by a :class:`LineSource` that cannot supply another line."""


@runtime_checkable
class LineSource(Protocol):
    """Anything that hands out one line of text per call.

    Implementations block until a line is available and raise
    :class:`TransportError` on I/O failure or end of stream.
    """

    def next_line(self) -> str:
        ...


class SentenceReader:
    """Read checksum-verified sentences from a :class:`LineSource`.

    Args:
        source: Transport supplying raw lines.

    Example::

        reader = SentenceReader(StreamLineSource(lines))
        sentence = reader.next_sentence()
    """

    def __init__(self, source: LineSource) -> None:
        self._source = source

    @property
    def source(self) -> LineSource:
        return self._source

    def next_sentence(self) -> str:
        """Block until a valid sentence arrives and return it.

        Invalid lines are discarded.  :class:`TransportError` from the source
        propagates immediately.
        """
        while True:
            line = self._source.next_line()
            if validate_sentence(line):
                return line
            logger.debug("Discarding invalid line: %r", line)


class TagFilter:
    """Select sentences by tag and hand back their bodies.

    Args:
        reader: Reader providing validated sentences.
    """

    def __init__(self, reader: SentenceReader) -> None:
        self._reader = reader

    @property
    def reader(self) -> SentenceReader:
        return self._reader

    def read_body_for_tag(self, tag: str) -> Optional[str]:
        """Return the body of the next sentence whose tag equals *tag*.

        Sentences with other tags are skipped.  The comparison is
        case-sensitive.

        Returns:
            The body text, or ``None`` if the transport failed.  A ``None``
            result means "no data yet"; the caller decides whether to retry.
        """
        while True:
            try:
                sentence = self._reader.next_sentence()
            except TransportError as exc:
                logger.debug("Transport failure while waiting for %s: %s", tag, exc)
                return None

            if sentence_tag(sentence) == tag:
                return sentence_body(sentence)
            logger.debug("Skipping %s sentence", sentence_tag(sentence))
