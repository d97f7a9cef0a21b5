"""Unit tests for ByteStream and the line/delimiter primitives."""

import io

import pytest

from abcdecoder.errors import StreamError
from abcdecoder.stream import (
    ByteStream,
    read_delimited,
    read_line_trimmed,
    skip_bom,
    skip_comment_lines,
    skip_spaces,
)


def test_stream_accepts_binary_file_object() -> None:
    stream = ByteStream(io.BytesIO(b"X:1\n"))
    assert stream.peek(2) == b"X:"


def test_read_and_unread_byte() -> None:
    stream = ByteStream(b"AB")
    assert stream.read_byte() == b"A"
    stream.unread_byte()
    assert stream.read_byte() == b"A"
    assert stream.read_byte() == b"B"
    assert stream.at_eof()


def test_read_byte_at_end_raises() -> None:
    with pytest.raises(StreamError):
        ByteStream(b"").read_byte()


def test_unread_at_start_raises() -> None:
    with pytest.raises(StreamError):
        ByteStream(b"A").unread_byte()


def test_peek_returns_short_window_near_end() -> None:
    stream = ByteStream(b"A")
    assert stream.peek(2) == b"A"


def test_skip_bom_consumes_byte_order_mark() -> None:
    stream = ByteStream("\ufeffX:1\n".encode("utf-8"))
    skip_bom(stream)
    assert stream.peek(1) == b"X"


def test_skip_bom_leaves_cursor_without_bom() -> None:
    stream = ByteStream("Ärger\n".encode("utf-8"))
    skip_bom(stream)
    assert stream.position == 0


def test_read_line_strips_comment_and_whitespace() -> None:
    stream = ByteStream(b"  T: Reel   % trailing comment\nX")
    assert read_line_trimmed(stream) == "T: Reel"
    assert stream.peek(1) == b"X"


def test_read_line_handles_crlf() -> None:
    assert read_line_trimmed(ByteStream(b"C:Trad\r\n")) == "C:Trad"


def test_read_line_without_newline_raises() -> None:
    with pytest.raises(StreamError):
        read_line_trimmed(ByteStream(b"K:G"))


def test_read_delimited_excludes_closing_byte() -> None:
    stream = ByteStream(b"[K:G]AB")
    stream.read_byte()
    assert read_delimited(stream, b"]") == "K:G"
    assert stream.peek(1) == b"A"


def test_unterminated_delimiter_raises_and_keeps_cursor() -> None:
    stream = ByteStream(b'"no closing quote')
    stream.read_byte()
    with pytest.raises(StreamError):
        read_delimited(stream, b'"')
    assert stream.position == 1


def test_skip_comment_lines() -> None:
    stream = ByteStream(b"% one\n%% two\nX:1\n")
    skip_comment_lines(stream)
    assert stream.peek(2) == b"X:"


def test_skip_comment_lines_handles_many_lines() -> None:
    stream = ByteStream(b"% filler\n" * 20000 + b"X:1\n")
    skip_comment_lines(stream)
    assert stream.peek(2) == b"X:"


def test_skip_comment_lines_at_unterminated_last_line() -> None:
    stream = ByteStream(b"% no newline")
    skip_comment_lines(stream)
    assert stream.at_eof()


def test_skip_spaces() -> None:
    stream = ByteStream(b"   A")
    skip_spaces(stream)
    assert stream.peek(1) == b"A"
