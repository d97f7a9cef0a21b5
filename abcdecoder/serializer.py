"""JSON interchange output for decoded documents.

Empty strings, zero meters and unset flags are left out of the output, so a
field that never appeared in the source is absent rather than empty. Titles
and the measure/note-group lists are always written.
"""

from __future__ import annotations

import json
from typing import Any, Final

from abcdecoder.models import Document, Measure, Metadata, NoteGroup, Tune, Unit

#: (attribute, JSON key) pairs shared by documents and tunes.
METADATA_KEYS: Final[list[tuple[str, str]]] = [
    ("area", "area"),
    ("book", "book"),
    ("composer", "composer"),
    ("discography", "discography"),
    ("file_url", "fileURL"),
    ("group", "group"),
    ("history", "history"),
    ("unit_note_length", "unitNoteLength"),
    ("meter_top", "meterTop"),
    ("meter_bottom", "meterBottom"),
    ("macro", "macro"),
    ("notes", "notes"),
    ("origin", "origin"),
    ("rhythm", "rhythm"),
    ("remark", "remark"),
    ("source", "source"),
    ("user_defined", "userDefined"),
    ("transcription", "transcription"),
]

TUNE_KEYS: Final[list[tuple[str, str]]] = [
    ("key", "key"),
    ("parts", "parts"),
    ("tempo", "tempo"),
    ("voice", "voice"),
    ("words", "words"),
]

MEASURE_KEYS: Final[list[tuple[str, str]]] = [
    ("meter_top", "meterTop"),
    ("meter_bottom", "meterBottom"),
    ("repeat_start", "repeatStart"),
    ("repeat_end", "repeatEnd"),
    ("thick_start", "startThick"),
    ("thick_end", "endThick"),
    ("barline_start", "barlineStart"),
    ("ending", "ending"),
]


def _copy_set(obj: Any, keys: list[tuple[str, str]], out: dict[str, Any]) -> None:
    """Copy every attribute of ``obj`` that holds a non-empty value."""
    for attr, key in keys:
        value = getattr(obj, attr)
        if value:
            out[key] = value


def unit_to_dict(unit: Unit) -> dict[str, Any]:
    out: dict[str, Any] = {
        "type": unit.kind,
        "value": unit.value,
        "duration": unit.duration,
    }
    if unit.annotation:
        out["annotation"] = unit.annotation
    return out


def note_group_to_dict(group: NoteGroup) -> dict[str, Any]:
    return {"units": [unit_to_dict(unit) for unit in group.units]}


def measure_to_dict(measure: Measure) -> dict[str, Any]:
    out: dict[str, Any] = {}
    _copy_set(measure, MEASURE_KEYS, out)
    out["noteGroups"] = [note_group_to_dict(group) for group in measure.note_groups]
    return out


def tune_to_dict(tune: Tune) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if tune.reference_number:
        out["referenceNumber"] = tune.reference_number
    out["title"] = tune.title
    _copy_set(tune, TUNE_KEYS, out)
    _copy_set(tune, METADATA_KEYS, out)
    out["measures"] = [measure_to_dict(measure) for measure in tune.measures]
    return out


def metadata_to_dict(meta: Metadata) -> dict[str, Any]:
    out: dict[str, Any] = {}
    _copy_set(meta, METADATA_KEYS, out)
    return out


def document_to_dict(doc: Document) -> dict[str, Any]:
    """Convert ``doc`` into plain dicts and lists ready for ``json.dumps``."""
    out: dict[str, Any] = {}
    if doc.version is not None:
        out["abc-version"] = doc.version
    out.update(metadata_to_dict(doc))
    out["tunes"] = [tune_to_dict(tune) for tune in doc.tunes]
    return out


def dumps(doc: Document, indent: int | None = None) -> str:
    """Serialize ``doc`` to JSON text."""
    return json.dumps(document_to_dict(doc), indent=indent, ensure_ascii=False)
