import os
from datetime import datetime
from flask import render_template, request, redirect, url_for, session, current_app, jsonify

from . import routine_bp
from . import catalog, history, routines
from .coach import CoachChat, ask_coach
from .errors import SessionError, ValidationError
from .models import Routine
from .session import RestTimer, WorkoutSession
from .storage import (
    ensure_data_files,
    load_document,
    save_document,
    load_draft,
    save_draft,
    clear_draft,
    load_settings,
)

from irontrack_core import login_required, log_action, current_user_key


def _data_dir():
    return ensure_data_files(current_app.config["DATA_DIR"])


def _settings():
    return load_settings(os.path.join(_data_dir(), "settings.json"))


def _load():
    return load_document(_data_dir(), current_user_key())


def _save(document):
    save_document(_data_dir(), current_user_key(), document)


def _int_arg(source, name, default=0):
    try:
        return int(source.get(name, default))
    except (TypeError, ValueError):
        return default


# ───────── Exercise catalog ─────────

@routine_bp.route("/exercises", methods=["GET", "POST"])
@login_required
def exercises():
    username = current_user_key()
    document = _load()
    error = None

    if request.method == "POST":
        form = request.form
        try:
            if form.get("delete") == "1":
                exercise_id = form.get("id")
                document = catalog.delete_exercise(document, exercise_id)
                log_action(username, "exercise_deleted", {"id": exercise_id})
            elif form.get("update") == "1":
                exercise_id = form.get("id")
                document = catalog.update_exercise(
                    document,
                    exercise_id,
                    name=(form.get("name") or "").strip(),
                    muscle_group=(form.get("muscle_group") or "").strip(),
                    default_sets=_int_arg(form, "default_sets", 3) or 3,
                    default_reps=(form.get("default_reps") or "10").strip(),
                    default_weight=float(form.get("default_weight") or 0),
                    notes=(form.get("notes") or "").strip(),
                )
                log_action(username, "exercise_updated", {"id": exercise_id})
            else:
                document, added = catalog.add_exercise(
                    document,
                    name=form.get("name") or "",
                    muscle_group=form.get("muscle_group") or "",
                    default_sets=_int_arg(form, "default_sets", 3) or 3,
                    default_reps=(form.get("default_reps") or "10").strip(),
                    default_weight=float(form.get("default_weight") or 0),
                    notes=(form.get("notes") or "").strip(),
                )
                log_action(username, "exercise_added", {"id": added.id, "name": added.name})
        except ValidationError as e:
            error = str(e)
        except ValueError:
            error = "Carga inválida."

        if error:
            log_action(username, "exercise_rejected", {"error": error})
        else:
            _save(document)
            return redirect(url_for("training.exercises"))

    term = request.args.get("q", "")
    log_action(username, "exercises_view")
    return render_template(
        "training/exercises.html",
        exercises=catalog.search_exercises(document.exercises, term),
        term=term,
        error=error,
    ), (400 if error else 200)


# ───────── Routines ─────────

@routine_bp.route("/routines", methods=["GET", "POST"])
@login_required
def routine_list():
    username = current_user_key()
    document = _load()

    if request.method == "POST":
        action = request.form.get("action")
        routine_id = request.form.get("routine_id")
        if action == "activate":
            document = routines.set_active(document, routine_id)
            log_action(username, "routine_activated", {"id": routine_id})
        elif action == "delete":
            document = routines.delete_routine(document, routine_id)
            draft = load_draft(_data_dir(), "sessions", username)
            if draft and draft.get("routine_id") == routine_id:
                clear_draft(_data_dir(), "sessions", username)
            log_action(username, "routine_deleted", {"id": routine_id})
        _save(document)
        return redirect(url_for("training.routine_list"))

    log_action(username, "routines_view")
    return render_template(
        "training/routines.html",
        routines=document.routines,
        active_routine_id=document.active_routine_id,
    )


@routine_bp.route("/routines/new", methods=["GET"])
@login_required
def routine_new():
    routine = routines.new_routine()
    save_draft(_data_dir(), "routines", current_user_key(), routine.to_dict())
    log_action(current_user_key(), "routine_new", {"id": routine.id})
    return redirect(url_for("training.routine_builder", routine_id=routine.id))


def _builder_draft(document, routine_id):
    draft = load_draft(_data_dir(), "routines", current_user_key())
    if draft and draft.get("id") == routine_id:
        return Routine.from_dict(draft)
    return document.find_routine(routine_id)


@routine_bp.route("/routines/<routine_id>", methods=["GET", "POST"])
@login_required
def routine_builder(routine_id):
    username = current_user_key()
    document = _load()
    routine = _builder_draft(document, routine_id)
    if routine is None:
        return redirect(url_for("training.routine_list"))

    error = None
    if request.method == "POST":
        form = request.form
        action = form.get("action")
        split_id = form.get("split_id")
        slot_id = form.get("slot_id")
        offset = _int_arg(form, "offset", 0)

        try:
            if action == "rename":
                routine = routines.rename_routine(routine, form.get("name") or "")
            elif action == "add_split":
                name = (form.get("name") or "").strip()
                if name:
                    # split names are shown upper-case in the builder
                    routine = routines.add_split(routine, name.upper())
            elif action == "remove_split":
                routine = routines.remove_split(routine, split_id)
            elif action == "move_split":
                routine = routines.move_split(routine, split_id, offset)
            elif action == "add_exercise":
                routine = routines.add_exercise(routine, split_id, form.get("exercise_id"), document.exercises)
            elif action == "remove_exercise":
                routine = routines.remove_exercise(routine, split_id, slot_id)
            elif action == "update_exercise":
                routine = routines.update_exercise_field(
                    routine, split_id, slot_id, form.get("field"), form.get("value")
                )
            elif action == "move_exercise":
                routine = routines.move_exercise(routine, split_id, slot_id, offset)
            elif action == "save":
                if "name" in form:
                    routine = routines.rename_routine(routine, form.get("name") or "")
                document = routines.save_routine(document, routine)
                _save(document)
                clear_draft(_data_dir(), "routines", username)
                log_action(username, "routine_saved", {"id": routine.id, "name": routine.name})
                return redirect(url_for("training.routine_list"))
            elif action == "discard":
                clear_draft(_data_dir(), "routines", username)
                return redirect(url_for("training.routine_list"))
        except ValidationError as e:
            error = str(e)
            log_action(username, "routine_rejected", {"id": routine.id, "error": error})

        save_draft(_data_dir(), "routines", username, routine.to_dict())
        if error is None:
            log_action(username, "routine_edit", {"id": routine.id, "action": action})
            return redirect(url_for("training.routine_builder", routine_id=routine.id))
    else:
        save_draft(_data_dir(), "routines", username, routine.to_dict())

    return render_template(
        "training/routine_builder.html",
        routine=routine,
        exercise_groups=catalog.group_by_muscle(document.exercises),
        exercise_name=lambda exercise_id: catalog.exercise_name(document.exercises, exercise_id),
        error=error,
    ), (400 if error else 200)


# ───────── Workout session ─────────

def _load_session(document):
    username = current_user_key()
    session_obj = WorkoutSession.resume(load_draft(_data_dir(), "sessions", username), document)
    if session_obj is not None:
        session_obj.timer = RestTimer.from_dict(session.get("workout_timer"))
    return session_obj


def _store_session(session_obj):
    save_draft(_data_dir(), "sessions", current_user_key(), session_obj.to_dict())
    session["workout_timer"] = session_obj.timer.to_dict()


def _load_chat():
    return CoachChat.from_dict(load_draft(_data_dir(), "coach", current_user_key()))


def _store_chat(chat):
    save_draft(_data_dir(), "coach", current_user_key(), chat.to_dict())


def _close_session():
    clear_draft(_data_dir(), "sessions", current_user_key())
    clear_draft(_data_dir(), "coach", current_user_key())
    session.pop("workout_timer", None)


@routine_bp.route("/workout", methods=["GET", "POST"])
@login_required
def workout():
    username = current_user_key()
    document = _load()
    session_obj = _load_session(document)

    if session_obj is None:
        try:
            session_obj = WorkoutSession.start(
                document, default_rest_seconds=_settings().get("default_rest_seconds")
            )
        except SessionError as e:
            log_action(username, "workout_unavailable", {"reason": type(e).__name__})
            return redirect(url_for("dashboard", error="no_active_routine"))
        session.pop("workout_timer", None)
        clear_draft(_data_dir(), "coach", username)
        _store_session(session_obj)
        log_action(username, "workout_started", {
            "routine": session_obj.routine.id,
            "split": session_obj.split.name,
        })

    if request.method == "POST":
        form = request.form
        action = form.get("action")
        slot_id = form.get("slot_id")
        set_index = _int_arg(form, "set_index", -1)
        try:
            if action == "set_field":
                session_obj.set_field(slot_id, set_index, form.get("field"), form.get("value"))
            elif action == "toggle":
                session_obj.toggle_complete(slot_id, set_index)
            elif action == "add_set":
                session_obj.add_set(slot_id)
            elif action == "remove_set":
                session_obj.remove_set(slot_id, set_index)
            elif action == "skip_timer":
                session_obj.skip_timer()
        except ValidationError as e:
            log_action(username, "workout_action_rejected", {"action": action, "error": str(e)})
            return redirect(url_for("training.workout", error=str(e)))
        except SessionError as e:
            log_action(username, "workout_action_rejected", {"action": action, "error": str(e)})
            return redirect(url_for("dashboard", error=str(e)))

        _store_session(session_obj)
        log_action(username, "workout_action", {"action": action, "slot": slot_id, "set": set_index})
        return redirect(url_for("training.workout"))

    session_obj.tick_timer()
    session["workout_timer"] = session_obj.timer.to_dict()
    settings = _settings()
    return render_template(
        "training/workout.html",
        workout=session_obj,
        exercise_name=lambda exercise_id: catalog.exercise_name(document.exercises, exercise_id),
        timer=session_obj.timer,
        chat=_load_chat(),
        error=request.args.get("error"),
        progress=lambda exercise_id: history.recent_progress(
            document.logs, exercise_id, settings.get("progress_points")
        ),
    )


@routine_bp.route("/workout/finish", methods=["POST"])
@login_required
def workout_finish():
    username = current_user_key()
    document = _load()
    session_obj = _load_session(document)
    if session_obj is None:
        return redirect(url_for("dashboard"))

    result = session_obj.finish(document.exercises)
    document = routines.replace_routine_and_log(document, result.routine, result.log)
    _save(document)
    _close_session()
    log_action(username, "workout_finished", {
        "routine": result.routine.id,
        "split": result.log.split_name,
        "exercises": len(result.log.exercises),
    })
    return redirect(url_for("training.workout_logs"))


@routine_bp.route("/workout/cancel", methods=["POST"])
@login_required
def workout_cancel():
    username = current_user_key()
    session_obj = _load_session(_load())
    if session_obj is not None:
        session_obj.cancel()
    _close_session()
    log_action(username, "workout_cancelled")
    return redirect(url_for("dashboard"))


@routine_bp.route("/workout/timer", methods=["GET"])
@login_required
def workout_timer():
    session_obj = _load_session(_load())
    if session_obj is None:
        session.pop("workout_timer", None)
        return jsonify({"active": False, "remaining": 0, "total": 0, "display": "0:00"})

    session_obj.tick_timer()
    session["workout_timer"] = session_obj.timer.to_dict()
    timer = session_obj.timer
    return jsonify({
        "active": timer.active,
        "remaining": timer.remaining,
        "total": timer.total,
        "display": timer.format_remaining(),
    })


@routine_bp.route("/coach", methods=["POST"])
@login_required
def coach():
    username = current_user_key()
    data = request.get_json(force=True, silent=True) or {}
    query = (data.get("query") or "").strip()
    if not query:
        return jsonify({"ok": False, "error": "empty_query"}), 400

    document = _load()
    session_obj = _load_session(document)
    if session_obj is not None:
        context = session_obj.coach_context(document.exercises)
    else:
        context = "Sem treino em andamento."

    chat = _load_chat()
    ticket = chat.ask(query)
    _store_chat(chat)

    answer = ask_coach(query, context)

    # reload: a later question may have taken a newer ticket meanwhile
    chat = _load_chat()
    accepted = chat.answer(ticket, answer)
    if accepted:
        _store_chat(chat)
    log_action(username, "coach_asked", {"ticket": ticket, "accepted": accepted})
    return jsonify({"ok": True, "ticket": ticket, "answer": answer, "accepted": accepted})


# ───────── History ─────────

@routine_bp.route("/logs", methods=["GET"])
@login_required
def workout_logs():
    username = current_user_key()
    document = _load()
    log_action(username, "workout_logs_view")
    return render_template(
        "training/logs.html",
        logs=history.logs_newest_first(document.logs),
        format_date=_format_timestamp,
    )


@routine_bp.route("/progress/<exercise_id>", methods=["GET"])
@login_required
def progress(exercise_id):
    username = current_user_key()
    document = _load()
    limit = _int_arg(request.args, "limit", _settings().get("progress_points"))
    points = history.recent_progress(document.logs, exercise_id, limit)
    log_action(username, "progress_view", {"exercise": exercise_id})
    return jsonify({
        "exercise_id": exercise_id,
        "exercise_name": catalog.exercise_name(document.exercises, exercise_id),
        "points": [{"date": p.date, "max_weight": p.max_weight} for p in points],
    })


def _format_timestamp(ts: str):
    dt = history.parse_log_date(ts)
    if dt == datetime.min:
        return ts or "-"
    return dt.strftime("%d/%m/%y %H:%M")
