import json
from dataclasses import FrozenInstanceError

import pytest

from irontrack.models import (
    Document,
    ExecutionStyle,
    PerformedSet,
    Routine,
    RoutineExercise,
    generate_id,
    with_routines,
)


def test_generate_id_shape():
    ids = {generate_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(len(i) == 7 and i.isalnum() and i == i.lower() for i in ids)


def test_performed_set_rejects_negative_weight():
    with pytest.raises(ValueError):
        PerformedSet(reps="10", weight=-1)


def test_entities_are_frozen(routine_ab):
    with pytest.raises(FrozenInstanceError):
        routine_ab.name = "other"


def test_execution_style_parse():
    assert ExecutionStyle.parse("Drop-Set") is ExecutionStyle.DROP_SET
    assert ExecutionStyle.parse("REST_PAUSE") is ExecutionStyle.REST_PAUSE
    assert ExecutionStyle.parse("Giant-Set") is ExecutionStyle.NORMAL
    assert ExecutionStyle.parse(None) is ExecutionStyle.NORMAL


def test_document_survives_json(document):
    raw = json.loads(json.dumps(document.to_dict()))
    assert raw["activeRoutineId"] == "r1"
    assert raw["routines"][0]["splits"][1]["exercises"][0]["lastPerformance"]["sets"][1]["weight"] == 65
    assert Document.from_dict(raw) == document


def test_reps_stay_strings():
    slot = RoutineExercise.from_dict({"id": "x", "exerciseId": "e", "targetSets": 3, "targetReps": "Falha"})
    assert slot.target_reps == "Falha"
    assert PerformedSet.from_dict({"reps": "60s", "weight": "12.5"}) == PerformedSet(reps="60s", weight=12.5)


def test_from_dict_drops_dangling_active_pointer():
    doc = Document.from_dict({"exercises": [], "routines": [], "activeRoutineId": "gone", "logs": []})
    assert doc.active_routine_id is None
    assert doc.active_routine is None


def test_routine_from_dict_clamps_index():
    routine = Routine.from_dict({
        "id": "r",
        "name": "R",
        "splits": [{"id": "a", "name": "A", "exercises": []}],
        "currentSplitIndex": 5,
    })
    assert routine.current_split_index == 0


def test_next_split(routine_ab):
    assert routine_ab.next_split.name == "A"
    assert Routine(id="empty", name="E").next_split is None
    assert not Routine(id="empty", name="E").is_startable


def test_with_routines_nulls_active(document):
    doc = with_routines(document, ())
    assert doc.active_routine_id is None
