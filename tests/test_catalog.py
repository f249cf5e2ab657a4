import pytest

from irontrack import catalog
from irontrack.errors import ValidationError
from irontrack.models import Document


def test_add_exercise(document):
    updated, added = catalog.add_exercise(document, "  Remada Baixa ", "Costas", default_reps="8-12")
    assert added.name == "Remada Baixa"
    assert added.default_sets == 3
    assert added.default_reps == "8-12"
    assert updated.exercises[-1] == added
    assert len(document.exercises) == 2


@pytest.mark.parametrize("name,group", [("", "Costas"), ("Remada", "  ")])
def test_add_exercise_requires_name_and_group(document, name, group):
    with pytest.raises(ValidationError):
        catalog.add_exercise(document, name, group)


def test_update_exercise(document, bench):
    updated = catalog.update_exercise(document, bench.id, default_reps="Falha", default_weight=-3)
    ex = catalog.find_exercise(updated.exercises, bench.id)
    assert ex.default_reps == "Falha"
    assert ex.default_weight == 0
    assert catalog.update_exercise(document, "missing", name="x") == document
    with pytest.raises(ValidationError):
        catalog.update_exercise(document, bench.id, name="")
    with pytest.raises(ValidationError):
        catalog.update_exercise(document, bench.id, id="hijack")


def test_delete_does_not_cascade(document, bench):
    updated = catalog.delete_exercise(document, bench.id)
    assert catalog.find_exercise(updated.exercises, bench.id) is None
    assert updated.routines == document.routines
    assert catalog.exercise_name(updated.exercises, bench.id) == catalog.UNKNOWN_EXERCISE


def test_search_exercises(bench, squat):
    exercises = (bench, squat)
    assert catalog.search_exercises(exercises, "SUPINO") == [bench]
    assert catalog.search_exercises(exercises, "pern") == [squat]
    assert catalog.search_exercises(exercises, "") == [bench, squat]


def test_group_by_muscle(bench, squat):
    groups = catalog.group_by_muscle(Document(exercises=(squat, bench)).exercises)
    assert list(groups) == ["Pernas", "Peitoral"]
