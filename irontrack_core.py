import os
import json
from datetime import datetime
from functools import wraps

from flask import current_app, request, redirect, session, url_for

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.environ.get("IRONTRACK_DATA_DIR", os.path.join(BASE_DIR, "data"))
USERS_FILE = os.environ.get("IRONTRACK_USERS_FILE", os.path.join(BASE_DIR, "users.json"))
LOG_FILE = os.path.join(DATA_DIR, "logs.jsonl")


def log_action(username, action, details=None):
    """Append a single log entry to logs.jsonl."""
    entry = {
        "timestamp": datetime.now().strftime("%d/%m/%Y %H:%M"),
        "username": username or "anonymous",
        "action": action,
        "ip": request.remote_addr,
        "path": request.path,
        "details": details or {},
        "user_agent": request.headers.get("User-Agent", ""),
    }

    path = current_app.config.get("LOG_FILE", LOG_FILE)
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "a") as f:
            f.write(json.dumps(entry, ensure_ascii=False) + "\n")
    except OSError:
        # Don't break the app if logging fails
        pass


def current_user_key():
    return session.get("username")


def login_required(view_func):
    @wraps(view_func)
    def wrapped_view(*args, **kwargs):
        if not session.get("logged_in"):
            return redirect(url_for("login", next=request.path))
        return view_func(*args, **kwargs)
    return wrapped_view
