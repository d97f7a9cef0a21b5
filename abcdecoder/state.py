"""Mutable state shared by the recursive-descent readers of one decode run."""

from __future__ import annotations

from dataclasses import dataclass, field

from abcdecoder.durations import DurationModifier
from abcdecoder.models import Document, Tune


@dataclass
class ParserState:
    """
    Everything the readers need to remember between calls.

    Attributes:
        document:           The document being built.
        in_file_header:     True while reading the optional file header.
        tune_header_done:   Set by ``K:``, cleared by ``X:``.
        last_field:         Letter of the last ``D``/``H``/``W``/``w`` field,
                            the target of a following ``+:`` continuation.
        modifier:           Pending broken-rhythm rescaling for the next unit.
        pending_annotation: Annotation text waiting for the next unit.
    """

    document: Document = field(default_factory=Document)
    in_file_header: bool = False
    tune_header_done: bool = False
    last_field: str = ""
    modifier: DurationModifier = DurationModifier.NONE
    pending_annotation: str = ""

    @property
    def tune(self) -> Tune | None:
        return self.document.current_tune

    def reset_tune(self) -> None:
        """Drop everything pending from the previous tune."""
        self.last_field = ""
        self.modifier = DurationModifier.NONE
        self.pending_annotation = ""

    def take_modifier(self) -> DurationModifier:
        """Return the pending modifier and clear it; it applies exactly once."""
        modifier = self.modifier
        self.modifier = DurationModifier.NONE
        return modifier

    def take_annotation(self) -> str:
        annotation = self.pending_annotation
        self.pending_annotation = ""
        return annotation
