"""ByteStream: an in-memory byte cursor with peek and pushback, plus line helpers.

The decoder never looks further ahead than two bytes and never backtracks more
than one unit, so a plain cursor over the whole input is all it needs. The
helper functions at the bottom advance the cursor but keep no parser state.
"""

from __future__ import annotations

from typing import BinaryIO

from abcdecoder.errors import StreamError

BOM = "\ufeff"
COMMENT = b"%"
NEWLINE = b"\n"
SPACE = b" "


class ByteStream:
    """
    Read-only cursor over the bytes of one ABC document.

    Usage:

        stream = ByteStream(b"X:1\\nT:Reel\\nK:D\\n")
        stream.peek(2)       # b"X:" -- does not move the cursor
        stream.read_byte()   # b"X"
        stream.unread_byte()
    """

    def __init__(self, source: bytes | bytearray | BinaryIO) -> None:
        if isinstance(source, (bytes, bytearray)):
            self._data = bytes(source)
        else:
            self._data = source.read()
        self._pos = 0
        self._last_rune_size = 0

    @property
    def position(self) -> int:
        return self._pos

    def at_eof(self) -> bool:
        return self._pos >= len(self._data)

    def peek(self, n: int = 1) -> bytes:
        """Return up to ``n`` upcoming bytes without consuming them."""
        return self._data[self._pos : self._pos + n]

    def read_byte(self) -> bytes:
        """
        Consume and return the next byte.

        Raises:
            StreamError: If the stream is exhausted.
        """
        if self.at_eof():
            raise StreamError(f"unexpected end of input at offset {self._pos}")
        b = self._data[self._pos : self._pos + 1]
        self._pos += 1
        return b

    def unread_byte(self) -> None:
        """Push the most recently consumed byte back onto the stream."""
        if self._pos == 0:
            raise StreamError("nothing to unread at start of input")
        self._pos -= 1

    def read_until(self, delim: bytes) -> bytes:
        """
        Consume bytes up to and including ``delim``.

        Raises:
            StreamError: If ``delim`` never occurs; the cursor is left unmoved.
        """
        idx = self._data.find(delim, self._pos)
        if idx == -1:
            raise StreamError(
                f"expected {delim!r} before end of input (from offset {self._pos})"
            )
        end = idx + len(delim)
        chunk = self._data[self._pos : end]
        self._pos = end
        return chunk

    def read_rune(self) -> str:
        """Consume one UTF-8 encoded code point."""
        if self.at_eof():
            raise StreamError(f"unexpected end of input at offset {self._pos}")
        size = _utf8_length(self._data[self._pos])
        chunk = self._data[self._pos : self._pos + size]
        self._pos += len(chunk)
        self._last_rune_size = len(chunk)
        return chunk.decode("utf-8", errors="replace")

    def unread_rune(self) -> None:
        if self._last_rune_size == 0:
            raise StreamError("unread_rune called without a preceding read_rune")
        self._pos -= self._last_rune_size
        self._last_rune_size = 0


def _utf8_length(lead: int) -> int:
    if lead < 0x80:
        return 1
    if lead >> 5 == 0b110:
        return 2
    if lead >> 4 == 0b1110:
        return 3
    if lead >> 3 == 0b11110:
        return 4
    return 1


def decode_text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


# ── Primitives ────────────────────────────────────────────────────────────────

def skip_bom(stream: ByteStream) -> None:
    """Consume a leading byte-order mark, if there is one."""
    if stream.at_eof():
        return
    if stream.read_rune() != BOM:
        stream.unread_rune()


def read_line_trimmed(stream: ByteStream) -> str:
    """
    Read one line and return it without its comment or surrounding whitespace.

    Everything from the first ``%`` onwards is dropped, then the text is
    stripped; the line terminator is never part of the result.

    Raises:
        StreamError: If the input ends before a newline.
    """
    raw = stream.read_until(NEWLINE)
    comment_start = raw.find(COMMENT)
    if comment_start != -1:
        raw = raw[:comment_start]
    return decode_text(raw).strip()


def read_delimited(stream: ByteStream, close: bytes) -> str:
    """
    Read up to and including ``close`` and return the text before it.

    The opening delimiter must already have been consumed by the caller.
    """
    raw = stream.read_until(close)
    return decode_text(raw[: -len(close)])


def skip_comment_lines(stream: ByteStream) -> None:
    while stream.peek(1) == COMMENT:
        try:
            stream.read_until(NEWLINE)
        except StreamError:
            # Trailing comment without a newline: nothing left to read.
            while not stream.at_eof():
                stream.read_byte()


def skip_spaces(stream: ByteStream) -> None:
    while stream.peek(1) == SPACE:
        stream.read_byte()
