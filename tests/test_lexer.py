"""Unit tests for the two-byte token classifier."""

import pytest

from abcdecoder.errors import StreamError
from abcdecoder.lexer import Category, classify, is_element, peek_token
from abcdecoder.stream import ByteStream


def test_pitch_letter_is_note() -> None:
    categories = classify(b"A2")
    assert Category.PITCH in categories
    assert Category.NOTE in categories
    assert Category.REST not in categories


def test_rest_is_note_but_not_pitch() -> None:
    categories = classify(b"z2")
    assert Category.REST in categories
    assert Category.NOTE in categories
    assert Category.PITCH not in categories


def test_accidental_starts_a_pitch() -> None:
    assert Category.PITCH in classify(b"^F")


@pytest.mark.parametrize("token", [b"|", b"| ", b"||", b"[|", b"|]", b":|", b"|:"])
def test_barline_tokens(token: bytes) -> None:
    assert Category.BARLINE in classify(token)


def test_thick_barline_is_not_inline_field() -> None:
    categories = classify(b"[|")
    assert Category.INLINE_FIELD not in categories
    assert Category.CHORD not in categories


def test_bracket_with_pitch_letter_is_chord_and_inline() -> None:
    categories = classify(b"[C")
    assert Category.CHORD in categories
    assert Category.INLINE_FIELD in categories


def test_bracket_with_field_letter_is_only_inline() -> None:
    categories = classify(b"[K")
    assert Category.INLINE_FIELD in categories
    assert Category.CHORD not in categories


@pytest.mark.parametrize("token", [b"[1", b"[2"])
def test_numbered_repeat(token: bytes) -> None:
    assert Category.REPEAT in classify(token)


def test_bracket_three_is_not_repeat() -> None:
    assert Category.REPEAT not in classify(b"[3")


@pytest.mark.parametrize("token", [b">A", b"<B"])
def test_broken_rhythm(token: bytes) -> None:
    assert Category.BROKEN_RHYTHM in classify(token)


def test_annotation_and_space() -> None:
    assert classify(b'"C') == frozenset({Category.ANNOTATION})
    assert classify(b" A") == frozenset({Category.SPACE})


@pytest.mark.parametrize("token", [b"M:", b"K:", b"w:", b"W:"])
def test_tune_body_field(token: bytes) -> None:
    assert Category.TUNE_BODY_FIELD in classify(token)


def test_lowercase_field_other_than_words_is_not_body_field() -> None:
    assert Category.TUNE_BODY_FIELD not in classify(b"m:")


def test_unrecognized_bytes_match_nothing() -> None:
    assert classify(b"#x") == frozenset()
    assert classify(b"") == frozenset()


def test_line_end_is_not_an_element() -> None:
    assert Category.LINE_END in classify(b"\nX")
    assert Category.LINE_END in classify(b"\r\n")
    assert not is_element(classify(b"\nX"))


def test_is_element_for_notes_and_barlines() -> None:
    assert is_element(classify(b"AB"))
    assert is_element(classify(b"|:"))
    assert not is_element(classify(b"%c"))


def test_peek_token_does_not_consume() -> None:
    stream = ByteStream(b"AB")
    assert Category.NOTE in peek_token(stream)
    assert stream.position == 0


def test_peek_token_at_end_of_input_raises() -> None:
    with pytest.raises(StreamError):
        peek_token(ByteStream(b""))


@pytest.mark.parametrize("token", [b"'A", b",C"])
def test_octave_mark_does_not_start_a_pitch(token: bytes) -> None:
    assert classify(token) == frozenset()
