"""Data models for decoded ABC documents.

The model is a strict ownership tree::

    Document -> Tune -> Measure -> NoteGroup -> Unit

A ``Unit`` is one of ``Note``, ``Rest`` or ``Chord``. All three expose a
textual ``value`` and a mutable ``duration`` so that broken-rhythm markers can
rescale the most recent unit in place, whatever its kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Union

REST_SYMBOL = "z"


# ── Units ─────────────────────────────────────────────────────────────────────

@dataclass
class Note:
    """
    A single pitched note.

    Attributes:
        value:      Pitch letter with any accidental prefix and octave marks,
                    e.g. ``"^c'"`` or ``"B,"``.
        duration:   Length in multiples of the unit note length.
        annotation: Quoted text that preceded the note in the source, if any.
    """

    kind: ClassVar[str] = "note"

    value: str
    duration: float = 1.0
    annotation: str = ""


@dataclass
class Rest:
    """A rest; it has no pitch, its value is always the rest symbol."""

    kind: ClassVar[str] = "rest"

    duration: float = 1.0
    annotation: str = ""

    @property
    def value(self) -> str:
        return REST_SYMBOL


@dataclass
class Chord:
    """
    Several notes sounded together, written ``[CEG]``.

    The notes share one duration; a chord cannot carry per-note lengths.
    """

    kind: ClassVar[str] = "chord"

    value: str
    duration: float = 1.0
    annotation: str = ""


Unit = Union[Note, Rest, Chord]


# ── Containers ────────────────────────────────────────────────────────────────

@dataclass
class NoteGroup:
    """Units beamed together, i.e. not separated by whitespace in the source."""

    units: list[Unit] = field(default_factory=list)

    def add_unit(self, unit: Unit) -> None:
        self.units.append(unit)

    @property
    def last_unit(self) -> Unit | None:
        return self.units[-1] if self.units else None


@dataclass
class Measure:
    """
    One bar of music.

    ``meter_top``/``meter_bottom`` stay 0 unless an ``M:`` field inside the
    tune body changed the meter while this measure was current.
    """

    meter_top: int = 0
    meter_bottom: int = 0
    repeat_start: bool = False
    repeat_end: bool = False
    thick_start: bool = False
    thick_end: bool = False
    barline_start: bool = False
    ending: int = 0
    note_groups: list[NoteGroup] = field(default_factory=lambda: [NoteGroup()])

    @property
    def current_group(self) -> NoteGroup:
        return self.note_groups[-1]


@dataclass
class Metadata:
    """Information fields shared by the file header and every tune header."""

    area: str = ""
    book: str = ""
    composer: str = ""
    discography: str = ""
    file_url: str = ""
    group: str = ""
    history: str = ""
    unit_note_length: str = ""
    meter_top: int = 0
    meter_bottom: int = 0
    macro: str = ""
    notes: str = ""
    origin: str = ""
    rhythm: str = ""
    remark: str = ""
    source: str = ""
    user_defined: str = ""
    transcription: str = ""


@dataclass
class Tune(Metadata):
    """
    One tune: its header fields plus the measures of its body.

    Tune-level values shadow the file-level defaults when rendering, but they
    are stored independently; nothing is copied down while decoding.
    """

    reference_number: int = 0
    title: str = ""
    key: str = ""
    parts: str = ""
    tempo: str = ""
    voice: str = ""
    words: str = ""
    measures: list[Measure] = field(default_factory=list)

    @property
    def current_measure(self) -> Measure:
        return self.measures[-1]


@dataclass
class Document(Metadata):
    """A decoded ABC file: file-header defaults followed by its tunes."""

    version: float | None = None
    tunes: list[Tune] = field(default_factory=list)

    @property
    def current_tune(self) -> Tune | None:
        return self.tunes[-1] if self.tunes else None
