"""
Workout session engine.

A session is built from the active routine's next split, edited set by set
while the user trains, and then either finished (producing an updated
routine and a new log in one ``SessionResult``) or cancelled (producing
nothing).

    UNINITIALIZED -> IN_PROGRESS -> FINISHED
                                 -> CANCELLED
"""

import time
from collections import namedtuple
from dataclasses import replace
from datetime import datetime
from enum import Enum

from .catalog import exercise_name
from .errors import (
    NoActiveRoutineError,
    RoutineNotStartableError,
    SessionClosedError,
    SessionError,
    ValidationError,
)
from .models import (
    DEFAULT_REST_SECONDS,
    LastPerformance,
    LoggedExercise,
    PerformedSet,
    WorkoutLog,
    generate_id,
)

SessionResult = namedtuple("SessionResult", ["routine", "log"])

SET_FIELDS = ("reps", "weight", "completed")
NEW_SET_DEFAULT = PerformedSet(reps="10", weight=0.0, completed=False)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"
    CANCELLED = "cancelled"


class RestTimer:
    """Single-shot rest countdown, one second per tick."""

    def __init__(self, active=False, remaining=0, total=0, last_tick_at=None):
        self.active = active
        self.remaining = remaining
        self.total = total
        self.last_tick_at = last_tick_at

    def start(self, seconds: int, now: float = None):
        # replaces whatever was left of the previous countdown
        self.total = max(int(seconds), 0)
        self.remaining = self.total
        self.active = self.total > 0
        self.last_tick_at = time.time() if now is None else now

    def tick(self) -> bool:
        if not self.active:
            return False
        self.remaining = max(self.remaining - 1, 0)
        if self.remaining == 0:
            self.active = False
        return self.active

    def sync(self, now: float = None) -> bool:
        """Apply every whole second elapsed since the last tick."""
        if not self.active:
            return False
        now = time.time() if now is None else now
        elapsed = int(now - (self.last_tick_at or now))
        for _ in range(min(max(elapsed, 0), self.remaining)):
            self.tick()
        if elapsed > 0:
            self.last_tick_at = (self.last_tick_at or now) + elapsed
        return self.active

    def skip(self):
        self.active = False
        self.remaining = 0

    def format_remaining(self) -> str:
        mins, secs = divmod(max(self.remaining, 0), 60)
        return f"{mins}:{secs:02d}"

    def to_dict(self) -> dict:
        return {
            "active": self.active,
            "remaining": self.remaining,
            "total": self.total,
            "last_tick_at": self.last_tick_at,
        }

    @classmethod
    def from_dict(cls, data) -> "RestTimer":
        data = data or {}
        return cls(
            active=bool(data.get("active")),
            remaining=int(data.get("remaining") or 0),
            total=int(data.get("total") or 0),
            last_tick_at=data.get("last_tick_at"),
        )


def seed_sets(slot):
    """Carry forward the last performance, or build the prescribed sets."""
    last = slot.last_performance
    if last is not None and last.sets:
        return [replace(s, completed=False) for s in last.sets]
    return [
        PerformedSet(reps=slot.target_reps, weight=0.0, completed=False)
        for _ in range(slot.target_sets)
    ]


def _parse_weight(value) -> float:
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
    try:
        weight = float(value or 0)
    except (TypeError, ValueError):
        raise ValidationError(f"Carga inválida: {value!r}")
    return weight if weight > 0 else 0.0


def _parse_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "on", "yes")
    return bool(value)


class WorkoutSession:

    def __init__(self, routine, default_rest_seconds: int = DEFAULT_REST_SECONDS):
        self.routine = routine
        self.split = None
        self.sets = {}
        self.state = SessionState.UNINITIALIZED
        self.started_at = None
        self.default_rest_seconds = default_rest_seconds
        self.timer = RestTimer()

    @classmethod
    def start(cls, document, default_rest_seconds: int = DEFAULT_REST_SECONDS, now=None):
        routine = document.active_routine
        if routine is None:
            raise NoActiveRoutineError("Nenhuma rotina ativa.")
        session = cls(routine, default_rest_seconds=default_rest_seconds)
        session.begin(now=now)
        return session

    def begin(self, now=None):
        if self.state is not SessionState.UNINITIALIZED:
            raise SessionClosedError(f"Session already {self.state.value}")
        split = self.routine.next_split
        if split is None:
            raise RoutineNotStartableError(f"Routine {self.routine.name!r} has no splits")

        self.split = split
        self.sets = {slot.id: seed_sets(slot) for slot in split.exercises}
        self.started_at = (now or datetime.now()).isoformat()
        self.state = SessionState.IN_PROGRESS

    # ───────── mutations while IN_PROGRESS ─────────

    def _require_open(self):
        if self.state is not SessionState.IN_PROGRESS:
            raise SessionClosedError(f"Session is {self.state.value}")

    def _slot_sets(self, slot_id: str):
        self._require_open()
        if slot_id not in self.sets:
            raise SessionError(f"Unknown exercise {slot_id!r} in this session")
        return self.sets[slot_id]

    def _rest_for(self, slot_id: str) -> int:
        slot = self.split.find(slot_id)
        rest = slot.rest_time_seconds if slot else 0
        return rest or self.default_rest_seconds or DEFAULT_REST_SECONDS

    def set_field(self, slot_id: str, set_index: int, field: str, value, now=None):
        sets = self._slot_sets(slot_id)
        if field not in SET_FIELDS:
            raise ValidationError(f"Campo desconhecido: {field}")
        if not 0 <= set_index < len(sets):
            raise SessionError(f"Set {set_index} out of range for {slot_id!r}")

        current = sets[set_index]
        if field == "reps":
            sets[set_index] = replace(current, reps="" if value is None else str(value))
        elif field == "weight":
            sets[set_index] = replace(current, weight=_parse_weight(value))
        else:
            completed = _parse_bool(value)
            sets[set_index] = replace(current, completed=completed)
            if completed and not current.completed:
                self.timer.start(self._rest_for(slot_id), now=now)
        return sets[set_index]

    def toggle_complete(self, slot_id: str, set_index: int, now=None):
        sets = self._slot_sets(slot_id)
        if not 0 <= set_index < len(sets):
            raise SessionError(f"Set {set_index} out of range for {slot_id!r}")
        return self.set_field(slot_id, set_index, "completed", not sets[set_index].completed, now=now)

    def add_set(self, slot_id: str):
        sets = self._slot_sets(slot_id)
        if sets:
            last = sets[-1]
            new_set = PerformedSet(reps=last.reps, weight=last.weight, completed=False)
        else:
            new_set = NEW_SET_DEFAULT
        sets.append(new_set)
        return new_set

    def remove_set(self, slot_id: str, set_index: int):
        sets = self._slot_sets(slot_id)
        if not 0 <= set_index < len(sets):
            raise SessionError(f"Set {set_index} out of range for {slot_id!r}")
        return sets.pop(set_index)

    def tick_timer(self, now=None) -> bool:
        # a finished or cancelled session never lets the timer run on
        if self.state is not SessionState.IN_PROGRESS:
            self.timer.skip()
            return False
        return self.timer.sync(now)

    def skip_timer(self):
        self.timer.skip()

    # ───────── terminal transitions ─────────

    def finish(self, exercises, now=None) -> SessionResult:
        self._require_open()
        date = (now or datetime.now()).isoformat()

        logged = []
        slots = []
        for slot in self.split.exercises:
            sets = tuple(self.sets.get(slot.id) or ())
            if not sets:
                # removed every set: not done today, keep the old carry-forward
                slots.append(slot)
                continue
            logged.append(LoggedExercise(
                exercise_id=slot.exercise_id,
                exercise_name=exercise_name(exercises, slot.exercise_id),
                sets=sets,
            ))
            slots.append(replace(slot, last_performance=LastPerformance(date=date, sets=sets)))

        log = WorkoutLog(
            id=generate_id(),
            date=date,
            routine_id=self.routine.id,
            split_name=self.split.name,
            exercises=tuple(logged),
        )

        splits = tuple(
            replace(s, exercises=tuple(slots)) if s.id == self.split.id else s
            for s in self.routine.splits
        )
        routine = replace(
            self.routine,
            splits=splits,
            current_split_index=(self.routine.current_split_index + 1) % len(splits),
        )

        self.state = SessionState.FINISHED
        self.timer.skip()
        return SessionResult(routine=routine, log=log)

    def cancel(self):
        self._require_open()
        self.sets = {}
        self.state = SessionState.CANCELLED
        self.timer.skip()

    # ───────── read helpers ─────────

    def completed_count(self, slot_id: str) -> int:
        return sum(1 for s in self.sets.get(slot_id, ()) if s.completed)

    def summary(self):
        rows = []
        for slot in self.split.exercises if self.split else ():
            sets = self.sets.get(slot.id, [])
            rows.append({
                "slot_id": slot.id,
                "completed": self.completed_count(slot.id),
                "total": len(sets),
                "target": slot.target_sets,
            })
        return rows

    def coach_context(self, exercises) -> str:
        names = ", ".join(exercise_name(exercises, slot.exercise_id) for slot in self.split.exercises)
        return f"Treino: {self.split.name}. Exercícios: {names}."

    # ───────── draft persistence ─────────

    def to_dict(self) -> dict:
        return {
            "routine_id": self.routine.id,
            "split_id": self.split.id if self.split else None,
            "state": self.state.value,
            "started_at": self.started_at,
            "default_rest_seconds": self.default_rest_seconds,
            "sets": {
                slot_id: [s.to_dict() for s in sets]
                for slot_id, sets in self.sets.items()
            },
        }

    @classmethod
    def resume(cls, data, document):
        """Rebuild an in-progress draft, or None if the routine moved on under it."""
        if not data or data.get("state") != SessionState.IN_PROGRESS.value:
            return None
        routine = document.active_routine
        if routine is None or routine.id != data.get("routine_id"):
            return None
        split = routine.next_split
        if split is None or split.id != data.get("split_id"):
            return None

        session = cls(routine, default_rest_seconds=data.get("default_rest_seconds") or DEFAULT_REST_SECONDS)
        session.split = split
        stored = data.get("sets") or {}
        for slot in split.exercises:
            if slot.id in stored:
                session.sets[slot.id] = [PerformedSet.from_dict(s) for s in stored[slot.id]]
            else:
                session.sets[slot.id] = seed_sets(slot)
        session.started_at = data.get("started_at")
        session.state = SessionState.IN_PROGRESS
        return session
