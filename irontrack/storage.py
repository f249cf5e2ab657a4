import os
import re
import json
import logging

from .defaults import DEFAULT_EXERCISES, DEFAULT_SETTINGS
from .models import Document, ExerciseDef

logger = logging.getLogger(__name__)

_UNSAFE_KEY = re.compile(r"[^A-Za-z0-9_.@-]")


def ensure_data_files(data_dir: str) -> str:
    os.makedirs(os.path.join(data_dir, "users"), exist_ok=True)
    os.makedirs(os.path.join(data_dir, "sessions"), exist_ok=True)
    os.makedirs(os.path.join(data_dir, "routines"), exist_ok=True)
    os.makedirs(os.path.join(data_dir, "coach"), exist_ok=True)

    settings_path = os.path.join(data_dir, "settings.json")
    if not os.path.exists(settings_path):
        with open(settings_path, "w") as f:
            json.dump(DEFAULT_SETTINGS, f, indent=2)

    return data_dir


def load_json(path: str, fallback):
    try:
        with open(path, "r") as f:
            return json.load(f)
    except FileNotFoundError:
        return fallback
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return fallback


def save_json(path: str, data):
    tmp_path = path + ".tmp"
    with open(tmp_path, "w") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    os.replace(tmp_path, path)


def _user_file(data_dir: str, folder: str, user_key: str) -> str:
    safe = _UNSAFE_KEY.sub("_", user_key or "anonymous")
    return os.path.join(data_dir, folder, f"{safe}.json")


def new_document() -> Document:
    """Fresh document for a new user: default catalog, nothing else."""
    return Document(
        exercises=tuple(ExerciseDef.from_dict(e) for e in DEFAULT_EXERCISES),
        routines=(),
        active_routine_id=None,
        logs=(),
    )


def load_document(data_dir: str, user_key: str) -> Document:
    data = load_json(_user_file(data_dir, "users", user_key), None)
    if not isinstance(data, dict):
        return new_document()
    try:
        return Document.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Discarding malformed document for %s: %s", user_key, e)
        return new_document()


def save_document(data_dir: str, user_key: str, document: Document):
    # whole-document overwrite
    save_json(_user_file(data_dir, "users", user_key), document.to_dict())


def load_draft(data_dir: str, kind: str, user_key: str):
    """Work in progress kept outside the document: "sessions" or "routines"."""
    return load_json(_user_file(data_dir, kind, user_key), None)


def save_draft(data_dir: str, kind: str, user_key: str, draft: dict):
    save_json(_user_file(data_dir, kind, user_key), draft)


def clear_draft(data_dir: str, kind: str, user_key: str):
    try:
        os.remove(_user_file(data_dir, kind, user_key))
    except FileNotFoundError:
        pass


def load_settings(path: str):
    data = load_json(path, DEFAULT_SETTINGS)
    if not isinstance(data, dict):
        data = {}
    for key, val in DEFAULT_SETTINGS.items():
        data.setdefault(key, val)
    return data


def save_settings(path: str, settings: dict):
    save_json(path, settings)
