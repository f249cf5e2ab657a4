from collections import namedtuple
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone

ProgressPoint = namedtuple("ProgressPoint", ["date", "max_weight"])

DEFAULT_PROGRESS_POINTS = 10


def parse_log_date(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat((value or "").replace("Z", "+00:00"))
    except ValueError:
        return datetime.min
    # aware values are compared as naive UTC
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def append_log(document, log):
    return replace(document, logs=document.logs + (log,))


def logs_newest_first(logs):
    return sorted(logs, key=lambda log: parse_log_date(log.date), reverse=True)


class ProgressSeries:
    """
    Max weight per session for one exercise, oldest first.

    Iterating runs the query again, so the same object can be walked as many
    times as a caller likes. ``completed`` is ignored on purpose: a logged
    attempt counts toward the max.
    """

    def __init__(self, logs, exercise_id: str):
        self._logs = logs
        self.exercise_id = exercise_id

    def __iter__(self):
        matching = [
            log for log in self._logs
            if any(e.exercise_id == self.exercise_id for e in log.exercises)
        ]
        # tie-break on id so equal dates come out the same for any input order
        matching.sort(key=lambda log: (parse_log_date(log.date), log.id))
        for log in matching:
            weights = [
                s.weight
                for e in log.exercises if e.exercise_id == self.exercise_id
                for s in e.sets
            ]
            yield ProgressPoint(date=log.date, max_weight=max(weights) if weights else 0.0)


def progress_series(logs, exercise_id: str) -> ProgressSeries:
    return ProgressSeries(logs, exercise_id)


def recent_progress(logs, exercise_id: str, limit: int = DEFAULT_PROGRESS_POINTS):
    points = list(progress_series(logs, exercise_id))
    if limit is None or limit <= 0:
        return points
    return points[-limit:]


def log_for_day(logs, day: date):
    for log in logs:
        if parse_log_date(log.date).date() == day:
            return log
    return None


def week_overview(logs, today: date = None):
    """Monday-to-Sunday strip with the log (if any) trained on each day."""
    today = today or date.today()
    monday = today - timedelta(days=today.weekday())
    days = []
    for i in range(7):
        day = monday + timedelta(days=i)
        days.append({
            "date": day,
            "is_today": day == today,
            "log": log_for_day(logs, day),
        })
    return days
