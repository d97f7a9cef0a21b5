"""Tune body reader: music lines into measures, note groups and units.

Grammar handled here (one tune body ends at a blank line or end of input)::

    body       ::= music-line+
    music-line ::= tune-body-field | element* line-end
    element    ::= note | annotation | space | barline | repeat | chord
                 | inline-field | broken-rhythm

A barline starts a new measure and a space starts a new note group; the
first measure and its first note group exist before any music is read.
"""

from __future__ import annotations

import logging

from abcdecoder.durations import DurationModifier, apply_modifier, read_duration
from abcdecoder.errors import MalformedPitch, MisplacedField, NoPrecedingUnit
from abcdecoder.fields import read_information_field
from abcdecoder.lexer import (
    ACCIDENTALS,
    OCTAVE_MARKS,
    PITCH_LETTERS,
    Category,
    is_element,
    peek_token,
)
from abcdecoder.models import Chord, Measure, NoteGroup, Note, Rest, Tune, Unit
from abcdecoder.state import ParserState
from abcdecoder.stream import ByteStream, read_delimited, skip_comment_lines

logger = logging.getLogger(__name__)

ANNOTATION_SEPARATOR = "\n"
ENDING_DIGITS = (b"1", b"2")
THICK_THIN = b"[|"
TUNE_START = b"X:"
INLINE_TUNE_START = b"[X"


def read_tune_body(stream: ByteStream, state: ParserState) -> bool:
    """
    Read the body of the current tune.

    Returns:
        True if the body ended at a blank line, an ``X:`` line or end of
        input, False if it stopped at a byte that starts no known
        production. In the latter case the stream is left at that byte.
    """
    tune = _current_tune(state)
    tune.measures = [Measure()]

    while True:
        skip_comment_lines(stream)
        if stream.at_eof():
            return True
        if Category.LINE_END in peek_token(stream):
            return True
        if stream.peek(len(TUNE_START)) == TUNE_START:
            # Next tune header with no blank line before it.
            return True
        if not read_music_line(stream, state):
            return False


def read_music_line(stream: ByteStream, state: ParserState) -> bool:
    """Read one line of music including its terminator; False if it stopped early."""
    categories = peek_token(stream)
    if Category.TUNE_BODY_FIELD in categories:
        read_information_field(stream, state)
        return True

    while is_element(categories):
        read_element(stream, state, categories)
        if stream.at_eof():
            return True
        categories = peek_token(stream)

    if Category.COMMENT in categories:
        skip_comment_lines(stream)
        return True
    if Category.LINE_END in categories:
        _read_line_end(stream)
        return True

    logger.warning(
        "Tune %d: stopped at unrecognized byte %r (offset %d)",
        _current_tune(state).reference_number,
        stream.peek(1),
        stream.position,
    )
    return False


def read_element(
    stream: ByteStream,
    state: ParserState,
    categories: frozenset[Category] | None = None,
) -> None:
    """
    Read one element and add what it describes to the current tune.

    Overlapping ``[`` categories are resolved as repeat, then chord, then
    inline field.
    """
    if categories is None:
        categories = peek_token(stream)

    tune = _current_tune(state)
    measure = tune.current_measure

    if Category.NOTE in categories:
        _read_note(stream, state, measure, categories)
    elif Category.ANNOTATION in categories:
        _read_annotation(stream, state)
    elif Category.SPACE in categories:
        measure.note_groups.append(NoteGroup())
        stream.read_byte()
    elif Category.BARLINE in categories:
        _read_barline(stream, tune)
    elif Category.REPEAT in categories:
        stream.read_byte()  # '['
        measure.ending = int(stream.read_byte().decode())
    elif Category.CHORD in categories:
        _read_chord(stream, state, measure)
    elif Category.INLINE_FIELD in categories:
        if stream.peek(len(INLINE_TUNE_START)) == INLINE_TUNE_START:
            raise MisplacedField(
                f"reference number field inside a tune body at offset {stream.position}"
            )
        read_information_field(stream, state, inline=True)
    elif Category.BROKEN_RHYTHM in categories:
        _read_broken_rhythm(stream, state, measure)


def read_pitch(stream: ByteStream) -> str:
    """
    Consume a pitch token: optional accidentals, a letter, then octave marks.

    Raises:
        MalformedPitch: If no pitch letter follows the accidentals.
    """
    token = bytearray()
    while stream.peek(1) and stream.peek(1)[0] in ACCIDENTALS:
        token += stream.read_byte()

    letter = stream.read_byte()
    if letter[0] not in PITCH_LETTERS:
        raise MalformedPitch(
            f"expected a pitch letter, got {letter!r} at offset {stream.position - 1}"
        )
    token += letter

    while stream.peek(1) and stream.peek(1)[0] in OCTAVE_MARKS:
        token += stream.read_byte()
    return token.decode("ascii")


# ------------------------------------------------------------------
# Private helpers
# ------------------------------------------------------------------

def _current_tune(state: ParserState) -> Tune:
    tune = state.tune
    if tune is None:
        raise RuntimeError("tune body read before any tune header")
    return tune


def _read_line_end(stream: ByteStream) -> None:
    if stream.read_byte() == b"\r":
        stream.read_byte()


def _append_unit(state: ParserState, measure: Measure, unit: Unit) -> None:
    unit.duration = apply_modifier(unit.duration, state.take_modifier())
    unit.annotation = state.take_annotation()
    measure.current_group.add_unit(unit)


def _read_note(
    stream: ByteStream,
    state: ParserState,
    measure: Measure,
    categories: frozenset[Category],
) -> None:
    unit: Unit
    if Category.REST in categories:
        stream.read_byte()  # 'z'
        unit = Rest(duration=read_duration(stream))
    else:
        pitch = read_pitch(stream)
        unit = Note(value=pitch, duration=read_duration(stream))
    _append_unit(state, measure, unit)


def _read_chord(stream: ByteStream, state: ParserState, measure: Measure) -> None:
    stream.read_byte()  # '['
    notes = read_delimited(stream, b"]")
    _append_unit(state, measure, Chord(value=notes, duration=read_duration(stream)))


def _read_annotation(stream: ByteStream, state: ParserState) -> None:
    stream.read_byte()  # opening quote
    text = read_delimited(stream, b'"')
    if state.pending_annotation:
        state.pending_annotation += ANNOTATION_SEPARATOR + text
    else:
        state.pending_annotation = text


def _read_barline(stream: ByteStream, tune: Tune) -> None:
    """
    Close the current measure and open the next one.

    The compound barline is decoded one byte at a time: the first byte sets
    the end flags of the closed measure, the byte after it (if it is a
    barline byte) sets the start flags of the new one.
    """
    marker = stream.read_byte()
    closed = tune.current_measure
    tune.measures.append(Measure())
    opened = tune.current_measure

    if marker == b"[":
        closed.thick_end = True
    elif marker == b":":
        closed.repeat_end = True

    nxt = stream.peek(1)
    if nxt == b"|":
        opened.barline_start = True
        stream.read_byte()
    elif stream.peek(2) == THICK_THIN:
        opened.thick_start = True
        stream.read_byte()
        stream.read_byte()
    elif nxt == b":":
        opened.repeat_start = True
        stream.read_byte()
    elif nxt == b"]":
        closed.thick_end = True
        stream.read_byte()

    if stream.peek(1) in ENDING_DIGITS:
        opened.ending = int(stream.read_byte().decode())


def _read_broken_rhythm(stream: ByteStream, state: ParserState, measure: Measure) -> None:
    marker = stream.read_byte()
    previous = measure.current_group.last_unit
    if previous is None:
        raise NoPrecedingUnit(
            f"broken rhythm {marker.decode()!r} at offset {stream.position - 1} "
            "has no preceding note in its group"
        )
    if marker == b">":
        previous.duration *= 2.0
        state.modifier = DurationModifier.HALVE_NEXT
    else:
        previous.duration /= 2.0
        state.modifier = DurationModifier.DOUBLE_NEXT
