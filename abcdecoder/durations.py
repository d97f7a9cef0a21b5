"""Note-length suffixes and broken-rhythm modifiers.

A length suffix follows a note, rest or chord and is expressed in multiples of
the unit note length::

    A     -> 1.0
    A2    -> 2.0
    A/2   -> 0.5
    A3/4  -> 0.75
"""

from __future__ import annotations

from enum import Enum

from abcdecoder.errors import MalformedDuration
from abcdecoder.stream import ByteStream

DEFAULT_DURATION = 1.0
FRACTION = b"/"


class DurationModifier(Enum):
    """One-shot rescaling left behind by a ``>`` or ``<`` for the next unit."""

    NONE = "none"
    HALVE_NEXT = "halve_next"
    DOUBLE_NEXT = "double_next"


def _read_digits(stream: ByteStream) -> str:
    digits = bytearray()
    while True:
        b = stream.peek(1)
        if not b or not b.isdigit():
            return digits.decode("ascii")
        digits += stream.read_byte()


def read_duration(stream: ByteStream) -> float:
    """
    Consume an optional length suffix and return its value.

    The first byte that cannot continue the suffix is left on the stream.

    Raises:
        MalformedDuration: If a ``/`` is not followed by denominator digits,
            or the denominator is zero.
    """
    numerator = _read_digits(stream)
    is_fraction = stream.peek(1) == FRACTION
    if is_fraction:
        stream.read_byte()

    if not numerator and not is_fraction:
        return DEFAULT_DURATION

    value = float(int(numerator)) if numerator else 1.0
    if not is_fraction:
        return value

    denominator = _read_digits(stream)
    if not denominator:
        raise MalformedDuration(
            f"no denominator after '/' in note length at offset {stream.position}"
        )
    if int(denominator) == 0:
        raise MalformedDuration(f"zero denominator in note length '{numerator}/0'")
    return value / int(denominator)


def parse_duration(text: str) -> float:
    """Parse a standalone length suffix such as ``"3/4"``."""
    return read_duration(ByteStream(text.encode("ascii")))


def apply_modifier(duration: float, modifier: DurationModifier) -> float:
    if modifier is DurationModifier.HALVE_NEXT:
        return duration / 2.0
    if modifier is DurationModifier.DOUBLE_NEXT:
        return duration * 2.0
    return duration
