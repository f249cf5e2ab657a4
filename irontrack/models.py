"""
Data model for a single user's training document.

Everything here is a frozen dataclass holding tuples, so a change always
produces a new value (``dataclasses.replace``) and a loaded document can be
shared between views without anyone mutating it underneath the others.

``to_dict`` / ``from_dict`` use the camelCase keys of the stored JSON.
"""

import random
import string
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

ID_ALPHABET = string.ascii_lowercase + string.digits
ID_LENGTH = 7

DEFAULT_REST_SECONDS = 60


def generate_id() -> str:
    return "".join(random.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


class ExecutionStyle(str, Enum):
    NORMAL = "Normal"
    BI_SET = "Bi-Set"
    DROP_SET = "Drop-Set"
    REST_PAUSE = "Rest-Pause"

    @classmethod
    def parse(cls, value) -> "ExecutionStyle":
        if isinstance(value, cls):
            return value
        for style in cls:
            if value in (style.value, style.name):
                return style
        return cls.NORMAL


def _to_weight(value) -> float:
    try:
        weight = float(value)
    except (TypeError, ValueError):
        return 0.0
    return weight if weight > 0 else 0.0


@dataclass(frozen=True)
class ExerciseDef:
    id: str
    name: str
    muscle_group: str
    default_sets: int = 3
    default_reps: str = "10"
    default_weight: float = 0.0
    notes: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "muscleGroup": self.muscle_group,
            "defaultSets": self.default_sets,
            "defaultReps": self.default_reps,
            "defaultWeight": self.default_weight,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseDef":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            muscle_group=data.get("muscleGroup", ""),
            default_sets=int(data.get("defaultSets") or 3),
            default_reps=str(data.get("defaultReps") or "10"),
            default_weight=_to_weight(data.get("defaultWeight")),
            notes=data.get("notes") or "",
        )


@dataclass(frozen=True)
class PerformedSet:
    # reps is an opaque token: "8-12", "10", "60s", "Falha"...
    reps: str
    weight: float = 0.0
    completed: bool = False

    def __post_init__(self):
        if self.weight < 0:
            raise ValueError("weight must be non-negative")

    def to_dict(self) -> dict:
        return {"reps": self.reps, "weight": self.weight, "completed": self.completed}

    @classmethod
    def from_dict(cls, data: dict) -> "PerformedSet":
        return cls(
            reps=str(data.get("reps", "")),
            weight=_to_weight(data.get("weight")),
            completed=bool(data.get("completed", False)),
        )


@dataclass(frozen=True)
class LastPerformance:
    date: str
    sets: Tuple[PerformedSet, ...] = ()

    def to_dict(self) -> dict:
        return {"date": self.date, "sets": [s.to_dict() for s in self.sets]}

    @classmethod
    def from_dict(cls, data: dict) -> "LastPerformance":
        return cls(
            date=data.get("date", ""),
            sets=tuple(PerformedSet.from_dict(s) for s in data.get("sets") or []),
        )


@dataclass(frozen=True)
class RoutineExercise:
    id: str
    exercise_id: str
    target_sets: int
    target_reps: str
    rest_time_seconds: int = DEFAULT_REST_SECONDS
    execution_style: ExecutionStyle = ExecutionStyle.NORMAL
    notes: str = ""
    last_performance: Optional[LastPerformance] = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "exerciseId": self.exercise_id,
            "targetSets": self.target_sets,
            "targetReps": self.target_reps,
            "restTimeSeconds": self.rest_time_seconds,
            "executionStyle": self.execution_style.value,
            "notes": self.notes,
        }
        if self.last_performance is not None:
            data["lastPerformance"] = self.last_performance.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "RoutineExercise":
        last = data.get("lastPerformance")
        return cls(
            id=data["id"],
            exercise_id=data.get("exerciseId", ""),
            target_sets=int(data.get("targetSets") or 0),
            target_reps=str(data.get("targetReps") or ""),
            rest_time_seconds=int(data.get("restTimeSeconds") or 0),
            execution_style=ExecutionStyle.parse(data.get("executionStyle")),
            notes=data.get("notes") or "",
            last_performance=LastPerformance.from_dict(last) if last else None,
        )


@dataclass(frozen=True)
class RoutineSplit:
    id: str
    name: str
    exercises: Tuple[RoutineExercise, ...] = ()

    def find(self, routine_exercise_id: str) -> Optional[RoutineExercise]:
        for ex in self.exercises:
            if ex.id == routine_exercise_id:
                return ex
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "exercises": [e.to_dict() for e in self.exercises],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RoutineSplit":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            exercises=tuple(RoutineExercise.from_dict(e) for e in data.get("exercises") or []),
        )


@dataclass(frozen=True)
class Routine:
    id: str
    name: str = ""
    splits: Tuple[RoutineSplit, ...] = ()
    current_split_index: int = 0

    @property
    def is_startable(self) -> bool:
        return bool(self.splits)

    @property
    def next_split(self) -> Optional[RoutineSplit]:
        if not self.splits:
            return None
        idx = self.current_split_index
        if not 0 <= idx < len(self.splits):
            idx = 0
        return self.splits[idx]

    def find_split(self, split_id: str) -> Optional[RoutineSplit]:
        for split in self.splits:
            if split.id == split_id:
                return split
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "splits": [s.to_dict() for s in self.splits],
            "currentSplitIndex": self.current_split_index,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Routine":
        splits = tuple(RoutineSplit.from_dict(s) for s in data.get("splits") or [])
        idx = int(data.get("currentSplitIndex") or 0)
        if not 0 <= idx < max(len(splits), 1):
            idx = 0
        return cls(id=data["id"], name=data.get("name", ""), splits=splits, current_split_index=idx)


@dataclass(frozen=True)
class LoggedExercise:
    exercise_id: str
    exercise_name: str
    sets: Tuple[PerformedSet, ...] = ()

    def to_dict(self) -> dict:
        return {
            "exerciseId": self.exercise_id,
            "exerciseName": self.exercise_name,
            "sets": [s.to_dict() for s in self.sets],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LoggedExercise":
        return cls(
            exercise_id=data.get("exerciseId", ""),
            exercise_name=data.get("exerciseName", ""),
            sets=tuple(PerformedSet.from_dict(s) for s in data.get("sets") or []),
        )


@dataclass(frozen=True)
class WorkoutLog:
    id: str
    date: str
    routine_id: str
    split_name: str
    exercises: Tuple[LoggedExercise, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "routineId": self.routine_id,
            "splitName": self.split_name,
            "exercises": [e.to_dict() for e in self.exercises],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutLog":
        return cls(
            id=data["id"],
            date=data.get("date", ""),
            routine_id=data.get("routineId", ""),
            split_name=data.get("splitName", ""),
            exercises=tuple(LoggedExercise.from_dict(e) for e in data.get("exercises") or []),
        )


@dataclass(frozen=True)
class Document:
    exercises: Tuple[ExerciseDef, ...] = ()
    routines: Tuple[Routine, ...] = ()
    active_routine_id: Optional[str] = None
    logs: Tuple[WorkoutLog, ...] = ()

    @property
    def active_routine(self) -> Optional[Routine]:
        if self.active_routine_id is None:
            return None
        return self.find_routine(self.active_routine_id)

    def find_routine(self, routine_id: str) -> Optional[Routine]:
        for routine in self.routines:
            if routine.id == routine_id:
                return routine
        return None

    def to_dict(self) -> dict:
        return {
            "exercises": [e.to_dict() for e in self.exercises],
            "routines": [r.to_dict() for r in self.routines],
            "activeRoutineId": self.active_routine_id,
            "logs": [log.to_dict() for log in self.logs],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Document":
        routines = tuple(Routine.from_dict(r) for r in data.get("routines") or [])
        active = data.get("activeRoutineId")
        if active is not None and not any(r.id == active for r in routines):
            active = None
        return cls(
            exercises=tuple(ExerciseDef.from_dict(e) for e in data.get("exercises") or []),
            routines=routines,
            active_routine_id=active,
            logs=tuple(WorkoutLog.from_dict(log) for log in data.get("logs") or []),
        )


def with_routines(document: Document, routines) -> Document:
    """Replace the routine list, dropping a now-dangling active pointer."""
    routines = tuple(routines)
    active = document.active_routine_id
    if active is not None and not any(r.id == active for r in routines):
        active = None
    return replace(document, routines=routines, active_routine_id=active)
