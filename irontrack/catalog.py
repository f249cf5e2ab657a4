from collections import OrderedDict
from dataclasses import replace

from .errors import ValidationError
from .models import ExerciseDef, generate_id

UNKNOWN_EXERCISE = "Desconhecido"

EDITABLE_FIELDS = ("name", "muscle_group", "default_sets", "default_reps", "default_weight", "notes")


def find_exercise(exercises, exercise_id: str):
    for ex in exercises:
        if ex.id == exercise_id:
            return ex
    return None


def exercise_name(exercises, exercise_id: str) -> str:
    """Name for display and log snapshots. Deleted exercises never raise."""
    ex = find_exercise(exercises, exercise_id)
    return ex.name if ex and ex.name else UNKNOWN_EXERCISE


def _check_required(name: str, muscle_group: str):
    if not (name or "").strip():
        raise ValidationError("O exercício precisa de um nome.")
    if not (muscle_group or "").strip():
        raise ValidationError("O exercício precisa de um grupo muscular.")


def add_exercise(document, name: str, muscle_group: str, default_sets: int = 3,
                 default_reps: str = "10", default_weight: float = 0, notes: str = ""):
    _check_required(name, muscle_group)
    exercise = ExerciseDef(
        id=generate_id(),
        name=name.strip(),
        muscle_group=muscle_group.strip(),
        default_sets=int(default_sets or 3),
        default_reps=str(default_reps or "10"),
        default_weight=max(float(default_weight or 0), 0.0),
        notes=notes or "",
    )
    return replace(document, exercises=document.exercises + (exercise,)), exercise


def update_exercise(document, exercise_id: str, **fields):
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Campo desconhecido: {', '.join(sorted(unknown))}")

    current = find_exercise(document.exercises, exercise_id)
    if current is None:
        return document

    updated = replace(current, **fields)
    _check_required(updated.name, updated.muscle_group)
    if updated.default_weight < 0:
        updated = replace(updated, default_weight=0.0)

    exercises = tuple(updated if ex.id == exercise_id else ex for ex in document.exercises)
    return replace(document, exercises=exercises)


def delete_exercise(document, exercise_id: str):
    # Routines and old logs keep their dangling ids; names fall back to UNKNOWN_EXERCISE.
    exercises = tuple(ex for ex in document.exercises if ex.id != exercise_id)
    return replace(document, exercises=exercises)


def search_exercises(exercises, term: str):
    term = (term or "").strip().lower()
    if not term:
        return list(exercises)
    return [
        ex for ex in exercises
        if term in ex.name.lower() or term in ex.muscle_group.lower()
    ]


def group_by_muscle(exercises):
    groups = OrderedDict()
    for ex in exercises:
        groups.setdefault(ex.muscle_group, []).append(ex)
    return groups
