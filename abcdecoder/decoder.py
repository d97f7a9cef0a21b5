"""Decoder: turns the bytes of an ABC file into a ``Document``.

Decoding runs as a fixed sequence of phases::

    skip BOM -> [%abc-<version> line] -> comments -> [file header]
             -> blank separator line -> (tune header -> tune body)*

Any error aborts the whole decode; no partially decoded document is returned.
"""

from __future__ import annotations

import logging
import os
from typing import BinaryIO

from abcdecoder.body import TUNE_START, read_tune_body
from abcdecoder.errors import (
    MissingReferenceNumber,
    MissingTitle,
    NotAnAbcFile,
    StreamError,
)
from abcdecoder.fields import read_information_field
from abcdecoder.lexer import Category, classify
from abcdecoder.models import Document
from abcdecoder.state import ParserState
from abcdecoder.stream import (
    NEWLINE,
    ByteStream,
    decode_text,
    skip_bom,
    skip_comment_lines,
)

logger = logging.getLogger(__name__)

MAGIC = b"%abc"
#: Files declaring this version or older predate the 2.1 standard.
OUTDATED_VERSION = 2.0


class Decoder:
    """
    Decode one ABC document from bytes, a binary file object or a ``ByteStream``.

    Usage:

        doc = Decoder(data).decode()
        for tune in doc.tunes:
            print(tune.reference_number, tune.title)

    A decoder instance is single-use and single-threaded: ``decode`` consumes
    the stream it was given.
    """

    def __init__(
        self,
        source: bytes | bytearray | BinaryIO | ByteStream,
        check_magic: bool = True,
    ) -> None:
        """
        Args:
            source:      The document to decode.
            check_magic: Require the ``%abc-<version>`` first line. Disable it
                         for fragments that were cut out of a larger file.
        """
        self.stream = source if isinstance(source, ByteStream) else ByteStream(source)
        self.check_magic = check_magic
        self.state = ParserState()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def decode(self) -> Document:
        """
        Decode the whole stream.

        Returns:
            The decoded document with every tune in source order.

        Raises:
            StreamError: If the input ends in the middle of a production.
            FormatError: If the input violates the ABC structure.
        """
        self.state = ParserState()

        skip_bom(self.stream)
        if self.check_magic:
            self._read_magic_number()

        skip_comment_lines(self.stream)
        if self._read_file_header():
            self._read_header_separator()

        skip_comment_lines(self.stream)
        if not self.stream.at_eof():
            self._read_tune()
            while self._seek_next_tune():
                self._read_tune()

        return self.state.document

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _read_magic_number(self) -> None:
        try:
            raw = self.stream.read_until(NEWLINE)
        except StreamError as exc:
            raise NotAnAbcFile("no abc file found: first line is not terminated") from exc

        line = raw.rstrip(b"\r\n")
        if len(line) < len(MAGIC):
            raise NotAnAbcFile("no abc file found: first line too short")
        if not line.startswith(MAGIC):
            raise NotAnAbcFile("no abc file found: first line does not start with %abc")

        version = decode_text(line[len(MAGIC) + 1 :]).strip()
        if not version:
            return
        try:
            self.state.document.version = float(version)
        except ValueError as exc:
            raise NotAnAbcFile(f"could not read abc version number {version!r}") from exc
        if self.state.document.version <= OUTDATED_VERSION:
            logger.warning("abc version %s is older than 2.1", version)

    def _read_file_header(self) -> bool:
        """Read the optional file header; returns whether one was present."""
        if self.stream.at_eof() or self.stream.peek(1) == TUNE_START[:1]:
            return False

        self.state.in_file_header = True
        try:
            while True:
                skip_comment_lines(self.stream)
                if self.stream.at_eof() or self._at_blank_line():
                    break
                if self.stream.peek(len(TUNE_START)) == TUNE_START:
                    # Tune header with no blank line before it.
                    break
                read_information_field(self.stream, self.state)
        finally:
            self.state.in_file_header = False
        return True

    def _read_header_separator(self) -> None:
        if self.stream.at_eof():
            return
        line = self.stream.read_until(NEWLINE)
        if line.strip(b"\r\n"):
            raise NotAnAbcFile("file header was not followed by an empty line")

    def _read_tune(self) -> None:
        self._read_tune_header()
        if not read_tune_body(self.stream, self.state):
            logger.warning(
                "Tune %d: remaining body skipped", self.state.document.tunes[-1].reference_number
            )

    def _read_tune_header(self) -> None:
        """Read ``X:``, then ``T:``, then fields up to and including ``K:``."""
        tunes = self.state.document.tunes
        before = len(tunes)

        read_information_field(self.stream, self.state)
        if len(tunes) == before:
            raise MissingReferenceNumber("tune header must start with a reference number (X:) field")

        read_information_field(self.stream, self.state)
        if not tunes[-1].title:
            raise MissingTitle(
                f"tune {tunes[-1].reference_number}: second header field must be a title (T:)"
            )

        while not self.state.tune_header_done:
            read_information_field(self.stream, self.state)

    def _seek_next_tune(self) -> bool:
        """Skip to the next line starting with ``X:``; False at end of input."""
        while not self.stream.at_eof():
            if self.stream.peek(len(TUNE_START)) == TUNE_START:
                return True
            if self.stream.peek(1) != NEWLINE:
                logger.debug("Skipping text between tunes at offset %d", self.stream.position)
            self._skip_line()
        return False

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _at_blank_line(self) -> bool:
        return Category.LINE_END in classify(self.stream.peek(2))

    def _skip_line(self) -> None:
        try:
            self.stream.read_until(NEWLINE)
        except StreamError:
            while not self.stream.at_eof():
                self.stream.read_byte()


def decode(data: bytes | bytearray | BinaryIO, check_magic: bool = True) -> Document:
    """Decode an ABC document held in memory or readable from a binary file object."""
    return Decoder(data, check_magic=check_magic).decode()


def decode_file(path: str | os.PathLike[str], check_magic: bool = True) -> Document:
    """
    Decode the ABC file at ``path``.

    Raises:
        OSError: If the file cannot be opened.
    """
    with open(path, "rb") as fh:
        return decode(fh, check_magic=check_magic)
