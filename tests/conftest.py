import json

import pytest
from werkzeug.security import generate_password_hash

from irontrack.models import (
    Document,
    ExerciseDef,
    LastPerformance,
    PerformedSet,
    Routine,
    RoutineExercise,
    RoutineSplit,
)


@pytest.fixture
def bench():
    return ExerciseDef(id="ex_bench", name="Supino Reto", muscle_group="Peitoral",
                       default_sets=3, default_reps="10", default_weight=20)


@pytest.fixture
def squat():
    return ExerciseDef(id="ex_squat", name="Agachamento", muscle_group="Pernas",
                       default_sets=4, default_reps="8-10", default_weight=40)


def make_slot(slot_id, exercise_id, sets=3, reps="10", rest=60, last=None):
    return RoutineExercise(
        id=slot_id,
        exercise_id=exercise_id,
        target_sets=sets,
        target_reps=reps,
        rest_time_seconds=rest,
        last_performance=last,
    )


@pytest.fixture
def routine_ab():
    """Two-split routine: A (bench) and B (squat, carrying a previous session)."""
    last = LastPerformance(
        date="2026-10-01T10:00:00",
        sets=(
            PerformedSet(reps="8", weight=60, completed=True),
            PerformedSet(reps="8", weight=65, completed=True),
        ),
    )
    return Routine(
        id="r1",
        name="AB Hipertrofia",
        splits=(
            RoutineSplit(id="sA", name="A", exercises=(make_slot("slot_bench", "ex_bench"),)),
            RoutineSplit(id="sB", name="B", exercises=(make_slot("slot_squat", "ex_squat", sets=4, reps="8-10", rest=90, last=last),)),
        ),
        current_split_index=0,
    )


@pytest.fixture
def document(bench, squat, routine_ab):
    return Document(
        exercises=(bench, squat),
        routines=(routine_ab,),
        active_routine_id=routine_ab.id,
        logs=(),
    )


@pytest.fixture
def client(tmp_path, monkeypatch):
    import app as app_module

    users_file = tmp_path / "users.json"
    users_file.write_text(json.dumps({
        "ana": {"password_hash": generate_password_hash("secret"), "name": "Ana"},
    }))

    flask_app = app_module.app
    monkeypatch.setitem(flask_app.config, "DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setitem(flask_app.config, "LOG_FILE", str(tmp_path / "data" / "logs.jsonl"))
    monkeypatch.setitem(flask_app.config, "USERS_FILE", str(users_file))
    monkeypatch.setitem(flask_app.config, "TESTING", True)

    with flask_app.test_client() as c:
        yield c


@pytest.fixture
def logged_in(client):
    resp = client.post("/login", data={"username": "ana", "password": "secret"})
    assert resp.status_code == 302
    return client
