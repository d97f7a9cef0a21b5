"""Information fields: ``Letter:value`` lines and inline ``[Letter:value]`` units.

A field writes to the file-level ``Document`` while the file header is being
read and to the current ``Tune`` otherwise. Unknown letters and text that only
looks like a field are skipped, never reported as errors.
"""

from __future__ import annotations

import logging
import re
from typing import Final

from abcdecoder.errors import InvalidReferenceNumber, MalformedMeter
from abcdecoder.models import Metadata, Tune
from abcdecoder.state import ParserState
from abcdecoder.stream import (
    ByteStream,
    read_delimited,
    read_line_trimmed,
    skip_comment_lines,
)

logger = logging.getLogger(__name__)

REFERENCE_NUMBER = "X"
TITLE = "T"
KEY = "K"
METER = "M"
CONTINUATION = "+"

TITLE_SEPARATOR = " \n"
CONTINUATION_SEPARATOR = "\n"

#: Letters that overwrite a same-named attribute on the document or tune.
SCALAR_FIELDS: Final[dict[str, str]] = {
    "A": "area",
    "B": "book",
    "C": "composer",
    "F": "file_url",
    "G": "group",
    "N": "notes",
    "O": "origin",
    "R": "rhythm",
    "r": "remark",
    "S": "source",
    "Z": "transcription",
}

#: Scalar letters that a following ``+:`` line may extend.
CONTINUABLE_FIELDS: Final[dict[str, str]] = {
    "D": "discography",
    "H": "history",
}

WORDS_FIELDS: Final[frozenset[str]] = frozenset("Ww")

#: Recognized letters whose values are consumed but not modeled yet.
RESERVED_FIELDS: Final[frozenset[str]] = frozenset("ILmQsUVP")

_UNSIGNED = re.compile(r"[0-9]+")


def _parse_unsigned(text: str) -> int | None:
    text = text.strip()
    if not _UNSIGNED.fullmatch(text):
        return None
    return int(text)


def parse_meter(value: str) -> tuple[int, int]:
    """
    Split an ``M:`` value such as ``"6/8"`` into ``(top, bottom)``.

    Raises:
        MalformedMeter: If there is no ``/`` or either side is not an integer.
    """
    top_text, sep, bottom_text = value.partition("/")
    if not sep:
        raise MalformedMeter(f"meter '{value}' has no '/' separator")
    top = _parse_unsigned(top_text)
    bottom = _parse_unsigned(bottom_text)
    if top is None or bottom is None:
        raise MalformedMeter(f"meter '{value}' is not of the form <int>/<int>")
    return top, bottom


def read_information_field(
    stream: ByteStream, state: ParserState, inline: bool = False
) -> None:
    """
    Read one information field from ``stream`` and apply it to ``state``.

    Args:
        stream: Positioned at the field (or at comment lines preceding it).
        state:  Parser state; decides whether the file or the tune is written.
        inline: Read a bracketed ``[Letter:value]`` instead of a whole line.
    """
    skip_comment_lines(stream)
    if inline:
        stream.read_byte()  # '['
        text = read_delimited(stream, b"]")
    else:
        text = read_line_trimmed(stream)
    apply_field(state, text)


def apply_field(state: ParserState, text: str) -> None:
    """Dispatch already-read field text such as ``"M:3/4"``."""
    if len(text) < 2 or text[1] != ":":
        logger.debug("Treating %r as free text", text)
        return

    letter = text[0]
    value = text[2:]

    if letter == REFERENCE_NUMBER:
        _start_tune(state, value)
    elif letter == METER:
        _set_meter(state, value)
    elif letter in SCALAR_FIELDS:
        _write(state, letter, SCALAR_FIELDS[letter], value)
    elif letter in CONTINUABLE_FIELDS:
        if _write(state, letter, CONTINUABLE_FIELDS[letter], value):
            state.last_field = letter
    elif letter == CONTINUATION:
        _continue_field(state, value)
    elif letter in RESERVED_FIELDS:
        logger.debug("Field %s: is not modeled; value %r dropped", letter, value)
    else:
        tune = _tune_target(state, letter)
        if tune is None:
            return
        if letter == TITLE:
            if tune.title:
                tune.title += TITLE_SEPARATOR + value
            else:
                tune.title = value
        elif letter == KEY:
            tune.key = value
            state.tune_header_done = True
        elif letter in WORDS_FIELDS:
            tune.words = value
            state.last_field = letter
        else:
            logger.debug("Ignoring unknown field %s:", letter)


# ------------------------------------------------------------------
# Private helpers
# ------------------------------------------------------------------

def _target(state: ParserState) -> Metadata | None:
    if state.in_file_header:
        return state.document
    return state.tune


def _tune_target(state: ParserState, letter: str) -> Tune | None:
    """Return the tune a tune-only field writes to, or None to skip it."""
    if state.in_file_header or state.tune is None:
        logger.debug("Field %s: outside a tune header is ignored", letter)
        return None
    return state.tune


def _write(state: ParserState, letter: str, attr: str, value: str) -> bool:
    target = _target(state)
    if target is None:
        logger.debug("Field %s: before any tune is ignored", letter)
        return False
    setattr(target, attr, value)
    return True


def _start_tune(state: ParserState, value: str) -> None:
    number = _parse_unsigned(value)
    if number is None:
        raise InvalidReferenceNumber(f"reference number '{value}' is not an unsigned integer")
    state.document.tunes.append(Tune(reference_number=number))
    state.tune_header_done = False
    state.reset_tune()


def _set_meter(state: ParserState, value: str) -> None:
    top, bottom = parse_meter(value)

    if state.in_file_header:
        state.document.meter_top, state.document.meter_bottom = top, bottom
        return

    tune = state.tune
    if tune is None:
        logger.debug("Meter %r before any tune is ignored", value)
        return
    if state.tune_header_done and tune.measures:
        measure = tune.current_measure
        measure.meter_top, measure.meter_bottom = top, bottom
    else:
        tune.meter_top, tune.meter_bottom = top, bottom


def _continue_field(state: ParserState, value: str) -> None:
    last = state.last_field
    if last in CONTINUABLE_FIELDS:
        target = _target(state)
        if target is not None:
            attr = CONTINUABLE_FIELDS[last]
            setattr(target, attr, getattr(target, attr) + CONTINUATION_SEPARATOR + value)
            return
    elif last in WORDS_FIELDS and state.tune is not None:
        state.tune.words += CONTINUATION_SEPARATOR + value
        return
    logger.debug("Continuation %r has nothing to continue", value)
