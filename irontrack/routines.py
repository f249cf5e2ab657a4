"""
Routine builder operations.

Every function takes a value and returns a new one; nothing is modified in
place. Unknown split / exercise ids are no-ops so a stale form post cannot
break a routine.
"""

from dataclasses import replace

from .catalog import find_exercise
from .errors import ValidationError
from .models import (
    DEFAULT_REST_SECONDS,
    ExecutionStyle,
    Routine,
    RoutineExercise,
    RoutineSplit,
    generate_id,
    with_routines,
)

EDITABLE_EXERCISE_FIELDS = (
    "target_sets",
    "target_reps",
    "rest_time_seconds",
    "execution_style",
    "notes",
)


def new_routine(name: str = "") -> Routine:
    return Routine(id=generate_id(), name=name, splits=(), current_split_index=0)


def rename_routine(routine: Routine, name: str) -> Routine:
    return replace(routine, name=name)


def _clamp_index(routine: Routine) -> Routine:
    if routine.splits and not 0 <= routine.current_split_index < len(routine.splits):
        return replace(routine, current_split_index=0)
    if not routine.splits and routine.current_split_index != 0:
        return replace(routine, current_split_index=0)
    return routine


def _map_split(routine: Routine, split_id: str, fn) -> Routine:
    if routine.find_split(split_id) is None:
        return routine
    splits = tuple(fn(s) if s.id == split_id else s for s in routine.splits)
    return replace(routine, splits=splits)


def _move(items: tuple, item_id: str, offset: int) -> tuple:
    ids = [i.id for i in items]
    if item_id not in ids:
        return items
    old = ids.index(item_id)
    new = max(0, min(len(items) - 1, old + offset))
    if new == old:
        return items
    reordered = list(items)
    reordered.insert(new, reordered.pop(old))
    return tuple(reordered)


def add_split(routine: Routine, name: str) -> Routine:
    split = RoutineSplit(id=generate_id(), name=name, exercises=())
    return replace(routine, splits=routine.splits + (split,))


def remove_split(routine: Routine, split_id: str) -> Routine:
    splits = tuple(s for s in routine.splits if s.id != split_id)
    if len(splits) == len(routine.splits):
        return routine

    current = routine.next_split
    routine = replace(routine, splits=splits)
    # keep pointing at the same split when it survived
    if current is not None and current.id != split_id:
        return replace(routine, current_split_index=[s.id for s in splits].index(current.id))
    return _clamp_index(routine)


def move_split(routine: Routine, split_id: str, offset: int) -> Routine:
    current = routine.next_split
    splits = _move(routine.splits, split_id, offset)
    if splits is routine.splits:
        return routine
    idx = [s.id for s in splits].index(current.id) if current else 0
    return replace(routine, splits=splits, current_split_index=idx)


def add_exercise(routine: Routine, split_id: str, exercise_id: str, exercises) -> Routine:
    base = find_exercise(exercises, exercise_id)
    if base is None:
        return routine

    entry = RoutineExercise(
        id=generate_id(),
        exercise_id=base.id,
        target_sets=base.default_sets,
        target_reps=base.default_reps,
        rest_time_seconds=DEFAULT_REST_SECONDS,
        execution_style=ExecutionStyle.NORMAL,
        last_performance=None,
    )
    return _map_split(routine, split_id, lambda s: replace(s, exercises=s.exercises + (entry,)))


def remove_exercise(routine: Routine, split_id: str, routine_exercise_id: str) -> Routine:
    return _map_split(
        routine,
        split_id,
        lambda s: replace(s, exercises=tuple(e for e in s.exercises if e.id != routine_exercise_id)),
    )


def _coerce_field(field: str, value):
    try:
        if field in ("target_sets", "rest_time_seconds"):
            return max(int(value), 0)
    except (TypeError, ValueError):
        raise ValidationError(f"Valor inválido para {field}: {value!r}")
    if field == "execution_style":
        return ExecutionStyle.parse(value)
    return "" if value is None else str(value)


def update_exercise_field(routine: Routine, split_id: str, routine_exercise_id: str, field: str, value) -> Routine:
    if field not in EDITABLE_EXERCISE_FIELDS:
        raise ValidationError(f"Campo não editável: {field}")
    value = _coerce_field(field, value)

    def update(split: RoutineSplit) -> RoutineSplit:
        exercises = tuple(
            replace(e, **{field: value}) if e.id == routine_exercise_id else e
            for e in split.exercises
        )
        return replace(split, exercises=exercises)

    return _map_split(routine, split_id, update)


def move_exercise(routine: Routine, split_id: str, routine_exercise_id: str, offset: int) -> Routine:
    return _map_split(
        routine,
        split_id,
        lambda s: replace(s, exercises=_move(s.exercises, routine_exercise_id, offset)),
    )


def validate_routine(routine: Routine):
    if not (routine.name or "").strip():
        raise ValidationError("A rotina precisa de um nome e pelo menos uma divisão.")
    if not routine.splits:
        raise ValidationError("A rotina precisa de um nome e pelo menos uma divisão.")


def save_routine(document, routine: Routine):
    """Upsert by id. The first routine saved into a document becomes active."""
    validate_routine(routine)
    routine = _clamp_index(routine)

    if document.find_routine(routine.id) is not None:
        routines = tuple(routine if r.id == routine.id else r for r in document.routines)
    else:
        routines = document.routines + (routine,)

    document = replace(document, routines=routines)
    if document.active_routine_id is None:
        document = replace(document, active_routine_id=routine.id)
    return document


def set_active(document, routine_id: str):
    if document.find_routine(routine_id) is None:
        return document
    return replace(document, active_routine_id=routine_id)


def delete_routine(document, routine_id: str):
    return with_routines(document, (r for r in document.routines if r.id != routine_id))


def replace_routine_and_log(document, routine: Routine, log):
    """Commit a finished session: routine replace-by-id plus log append, as one value."""
    routines = tuple(routine if r.id == routine.id else r for r in document.routines)
    return replace(document, routines=routines, logs=document.logs + (log,))
