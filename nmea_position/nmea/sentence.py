"""
nmea/sentence.py

Integrity checks and field splitting for single NMEA 0183 sentences.

Sentence layout
---------------
::

    $GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47
    ^^    ^^                                                        ^^^
    | tag |  body ...                                               checksum

* The **tag** is the five characters after ``$`` (talker ID + sentence
  identifier, e.g. ``GPGGA``).
* The **body** is everything after the tag and its comma, up to ``*``.
* The **checksum** is the XOR of every character strictly between ``$``
  and ``*``, written as two hexadecimal digits.

References
----------
* NMEA 0183 Standard (version 4.11)
"""

from __future__ import annotations

from typing import Iterable, List, Optional

# "$GPxxx*ss" is the shortest line that can carry a tag and a checksum.
MIN_SENTENCE_LENGTH = 9

TAG_LENGTH = 5

# Offset of the body: "$" + tag + ","
BODY_OFFSET = 1 + TAG_LENGTH + 1


# ---------------------------------------------------------------------------
# Checksum
# ---------------------------------------------------------------------------


def nmea_checksum(payload: str) -> int:
    """Return the 8-bit XOR of every character in *payload*."""
    checksum = 0
    for ch in payload:
        checksum ^= ord(ch)
    return checksum & 0xFF


def format_checksum(checksum: int) -> str:
    """Render a checksum as two zero-padded uppercase hex digits."""
    return f"{checksum & 0xFF:02X}"


def validate_sentence(line: Optional[str]) -> bool:
    """Return ``True`` when *line* is a well-formed, checksum-correct sentence.

    A line is rejected when it is empty or ``None``, shorter than
    :data:`MIN_SENTENCE_LENGTH`, does not start with ``$``, has no ``*``,
    does not carry exactly two characters after the first ``*``, or when
    those characters do not match the computed checksum (case-insensitive).
    """
    if not line or len(line) < MIN_SENTENCE_LENGTH:
        return False
    if not line.startswith("$"):
        return False

    star = line.find("*")
    if star < 0:
        return False

    provided = line[star + 1:]
    if len(provided) != 2:
        return False

    return provided.lower() == format_checksum(nmea_checksum(line[1:star])).lower()


def build_sentence(tag: str, fields: Iterable[str]) -> str:
    """Assemble ``$<tag>,<fields...>*HH`` with a correct checksum.

    Example::

        sentence = build_sentence("GPGGA", ["123519", "4807.038", "N", ""])
        # "$GPGGA,123519,4807.038,N,*" followed by two hex digits
    """
    payload = ",".join([tag, *fields])
    return f"${payload}*{format_checksum(nmea_checksum(payload))}"


# ---------------------------------------------------------------------------
# Tag and body extraction
# ---------------------------------------------------------------------------


def sentence_tag(sentence: str) -> str:
    """Return the five-character tag immediately after ``$``."""
    return sentence[1:1 + TAG_LENGTH]


def sentence_body(sentence: str) -> str:
    """Return the text after the tag and its comma, excluding the checksum."""
    star = sentence.find("*")
    if star < 0:
        return sentence[BODY_OFFSET:]
    return sentence[BODY_OFFSET:star]


# ---------------------------------------------------------------------------
# Field splitting
# ---------------------------------------------------------------------------


def split_fields(body: str) -> List[str]:
    """Split a comma-delimited *body* into its fields.

    Fields are not trimmed and empty fields keep their position.  Only the
    segments that are terminated by a comma are returned, so the text after
    the last comma is dropped and ``len(result) == body.count(",")``::

        >>> split_fields("a,b,c")
        ['a', 'b']
        >>> split_fields("a,b,c,")
        ['a', 'b', 'c']

    A new list is returned on every call.
    """
    return body.split(",")[:-1]
