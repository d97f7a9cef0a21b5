"""Token classifier: decides which grammar production the next bytes start.

Classification is pure. It looks at a lookahead window of at most two bytes
and never consumes input; callers peek again after every read.
"""

from __future__ import annotations

import re
from enum import Enum

from abcdecoder.errors import StreamError
from abcdecoder.stream import ByteStream

LOOKAHEAD = 2

PITCH_LETTERS = frozenset(b"ABCDEFGabcdefg")
OCTAVE_MARKS = frozenset(b"',")
ACCIDENTALS = frozenset(b"^_=")
REST = ord("z")

COMPOUND_BARLINES = frozenset({b"||", b"[|", b"|]", b":|", b"|:"})

_TUNE_BODY_FIELD = re.compile(rb"[A-Zw]:")


class Category(Enum):
    NOTE = "note"
    PITCH = "pitch"
    REST = "rest"
    ANNOTATION = "annotation"
    CHORD = "chord"
    BARLINE = "barline"
    INLINE_FIELD = "inline_field"
    REPEAT = "repeat"
    BROKEN_RHYTHM = "broken_rhythm"
    SPACE = "space"
    TUNE_BODY_FIELD = "tune_body_field"
    LINE_END = "line_end"
    COMMENT = "comment"


ELEMENT_CATEGORIES = frozenset(
    {
        Category.NOTE,
        Category.ANNOTATION,
        Category.BARLINE,
        Category.SPACE,
        Category.INLINE_FIELD,
        Category.REPEAT,
        Category.CHORD,
        Category.BROKEN_RHYTHM,
    }
)


def classify(token: bytes) -> frozenset[Category]:
    """
    Return every category whose production can start with ``token``.

    Args:
        token: Up to two lookahead bytes. An empty token matches nothing.

    Returns:
        The (possibly empty) set of matching categories. Bytes that fit no
        production simply yield an empty set; they are never an error.
    """
    if not token:
        return frozenset()

    first = token[0]
    second = token[1] if len(token) > 1 else None
    found: set[Category] = set()

    # Octave marks only continue a pitch; they never start one.
    if first in PITCH_LETTERS or first in ACCIDENTALS:
        found.add(Category.PITCH)
    if first == REST:
        found.add(Category.REST)
    if Category.PITCH in found or Category.REST in found:
        found.add(Category.NOTE)

    if first == ord('"'):
        found.add(Category.ANNOTATION)
    if first == ord("[") and any(b in PITCH_LETTERS for b in token):
        found.add(Category.CHORD)
    if first == ord("|") or token in COMPOUND_BARLINES:
        found.add(Category.BARLINE)
    if first == ord("[") and second != ord("|"):
        found.add(Category.INLINE_FIELD)
    if first == ord("[") and second in (ord("1"), ord("2")):
        found.add(Category.REPEAT)
    if first in (ord("<"), ord(">")):
        found.add(Category.BROKEN_RHYTHM)
    if first == ord(" "):
        found.add(Category.SPACE)
    if _TUNE_BODY_FIELD.fullmatch(token):
        found.add(Category.TUNE_BODY_FIELD)
    if first == ord("\n") or token == b"\r\n":
        found.add(Category.LINE_END)
    if first == ord("%"):
        found.add(Category.COMMENT)

    return frozenset(found)


def is_element(categories: frozenset[Category]) -> bool:
    return not categories.isdisjoint(ELEMENT_CATEGORIES)


def peek_token(stream: ByteStream) -> frozenset[Category]:
    """
    Classify the next bytes of ``stream`` without consuming them.

    Raises:
        StreamError: If there is nothing left to peek at.
    """
    token = stream.peek(LOOKAHEAD)
    if not token:
        raise StreamError(f"unexpected end of input at offset {stream.position}")
    return classify(token)
