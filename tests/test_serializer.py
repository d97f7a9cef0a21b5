"""Unit tests for the JSON interchange output."""

import json

from abcdecoder import decode
from abcdecoder.models import Chord, Document, Measure, Note, NoteGroup, Rest, Tune
from abcdecoder.serializer import (
    document_to_dict,
    dumps,
    measure_to_dict,
    tune_to_dict,
    unit_to_dict,
)


def test_note_dict() -> None:
    assert unit_to_dict(Note(value="^c'", duration=1.5)) == {
        "type": "note",
        "value": "^c'",
        "duration": 1.5,
    }


def test_rest_and_chord_dicts() -> None:
    assert unit_to_dict(Rest(duration=2.0)) == {"type": "rest", "value": "z", "duration": 2.0}
    assert unit_to_dict(Chord(value="CEG", annotation="C")) == {
        "type": "chord",
        "value": "CEG",
        "duration": 1.0,
        "annotation": "C",
    }


def test_empty_measure_keeps_note_groups() -> None:
    assert measure_to_dict(Measure()) == {"noteGroups": [{"units": []}]}


def test_measure_flags_use_interchange_names() -> None:
    measure = Measure(
        meter_top=3,
        meter_bottom=4,
        repeat_start=True,
        thick_end=True,
        ending=2,
        note_groups=[NoteGroup(units=[Note(value="A")])],
    )
    assert measure_to_dict(measure) == {
        "meterTop": 3,
        "meterBottom": 4,
        "repeatStart": True,
        "endThick": True,
        "ending": 2,
        "noteGroups": [{"units": [{"type": "note", "value": "A", "duration": 1.0}]}],
    }


def test_tune_dict_always_has_title() -> None:
    assert tune_to_dict(Tune()) == {"title": "", "measures": []}


def test_tune_dict_fields() -> None:
    tune = Tune(
        reference_number=3,
        title="Reel",
        key="D",
        file_url="http://example.org/reel.abc",
        user_defined="x",
    )
    out = tune_to_dict(tune)
    assert out["referenceNumber"] == 3
    assert out["key"] == "D"
    assert out["fileURL"] == "http://example.org/reel.abc"
    assert out["userDefined"] == "x"
    assert "composer" not in out


def test_document_dict_without_version() -> None:
    assert document_to_dict(Document()) == {"tunes": []}


def test_document_dict_from_decoded_input() -> None:
    doc = decode(b"%abc-2.1\nC:Collector\nM:3/4\n\nX:1\nT:Waltz\nK:G\nG2 B|d3|]\n")
    out = document_to_dict(doc)

    assert out["abc-version"] == 2.1
    assert out["composer"] == "Collector"
    assert (out["meterTop"], out["meterBottom"]) == (3, 4)

    (tune,) = out["tunes"]
    assert tune["referenceNumber"] == 1
    assert tune["title"] == "Waltz"
    assert tune["measures"][1] == {
        "endThick": True,
        "noteGroups": [{"units": [{"type": "note", "value": "d", "duration": 3.0}]}],
    }


def test_dumps_keeps_non_ascii_text() -> None:
    doc = Document(tunes=[Tune(reference_number=1, title="Sí Bheag")])
    text = dumps(doc, indent=2)
    assert "Sí Bheag" in text
    assert json.loads(text)["tunes"][0]["title"] == "Sí Bheag"
