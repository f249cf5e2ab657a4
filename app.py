#!/usr/bin/env python3
import os
import json

from flask import Flask, render_template, request, redirect, url_for, session, jsonify
from werkzeug.security import check_password_hash

from irontrack import routine_bp
from irontrack.history import week_overview
from irontrack.storage import ensure_data_files, load_document
from irontrack_core import DATA_DIR, LOG_FILE, USERS_FILE, login_required, log_action

app = Flask(__name__)
app.register_blueprint(routine_bp, url_prefix="/training")


# ───────────── Config ─────────────
app.config["SECRET_KEY"] = os.environ.get("FLASK_SECRET_KEY", "change-me-to-something-random")
app.config["DATA_DIR"] = DATA_DIR
app.config["LOG_FILE"] = LOG_FILE
app.config["USERS_FILE"] = USERS_FILE


# ───────────── User helpers ─────────────
def load_users():
    """Load users from users.json, returns dict like {username: {password_hash: '...', name: '...'}}"""
    path = app.config["USERS_FILE"]
    if not os.path.exists(path):
        return {}
    with open(path, "r") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError:
            return {}


def get_user(username):
    users = load_users()
    return users.get(username)


def load_audit_log(limit=200):
    """Load the last `limit` audit entries for the current user, newest first."""
    path = app.config["LOG_FILE"]
    if not os.path.exists(path):
        return []

    try:
        with open(path, "r") as f:
            lines = f.readlines()
    except OSError:
        return []

    username = session.get("username")
    entries = []
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            entry = json.loads(line)
        except json.JSONDecodeError:
            continue
        if entry.get("username") == username:
            entries.append(entry)

    entries = entries[-limit:]
    entries.reverse()  # newest first
    return entries


# ───────────── Routes ─────────────
@app.route("/login", methods=["GET", "POST"])
def login():
    # If already logged in, skip login page
    if session.get("logged_in"):
        return redirect(url_for("dashboard"))

    error = None

    if request.method == "POST":
        username = request.form.get("username", "").strip()
        password = request.form.get("password", "")

        user = get_user(username)

        if user and check_password_hash(user["password_hash"], password):
            session["logged_in"] = True
            session["username"] = username
            session["name"] = user.get("name", username)
            log_action(username, "login")
            next_url = request.args.get("next") or url_for("dashboard")
            return redirect(next_url)
        else:
            error = "Usuário ou senha inválidos"
            log_action(username or "unknown", "login_failed")

    return render_template("login.html", error=error)


@app.route("/logout")
def logout():
    username = session.get("username")
    log_action(username, "logout")
    session.clear()
    return redirect(url_for("login"))


@app.route("/")
@login_required
def dashboard():
    username = session.get("username")
    data_dir = ensure_data_files(app.config["DATA_DIR"])
    document = load_document(data_dir, username)

    routine = document.active_routine
    next_split = routine.next_split if routine else None

    log_action(username, "view_dashboard", {"active_routine": document.active_routine_id})
    return render_template(
        "dashboard.html",
        name=session.get("name") or username,
        routine=routine,
        next_split=next_split,
        exercises={e.id: e for e in document.exercises},
        week=week_overview(document.logs),
        error=request.args.get("error"),
    )


@app.route("/activity")
@login_required
def view_activity():
    """The user's own audit trail."""
    username = session.get("username")
    log_action(username, "view_activity")
    return jsonify({"entries": load_audit_log(limit=200)})


@app.route("/log-action", methods=["POST"])
@login_required
def log_action_endpoint():
    """Endpoint for page JS to log user actions (e.g. opening a chart)."""
    username = session.get("username")
    data = request.get_json(force=True, silent=True) or {}

    action = data.get("action", "unknown_action")
    details = {
        "target": data.get("target"),
        "extra": data.get("extra"),
    }

    log_action(username, action, details)
    return jsonify({"status": "ok"})


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=8000, debug=True)
