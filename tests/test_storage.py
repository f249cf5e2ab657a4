import json

from irontrack import storage
from irontrack.defaults import DEFAULT_EXERCISES, DEFAULT_SETTINGS


def test_missing_document_is_seeded(tmp_path):
    data_dir = storage.ensure_data_files(str(tmp_path))
    doc = storage.load_document(data_dir, "nobody")
    assert len(doc.exercises) == len(DEFAULT_EXERCISES)
    assert doc.exercises[5].default_reps == "Falha"
    assert doc.routines == ()
    assert doc.active_routine_id is None


def test_document_round_trip(tmp_path, document):
    data_dir = storage.ensure_data_files(str(tmp_path))
    storage.save_document(data_dir, "ana", document)
    assert storage.load_document(data_dir, "ana") == document
    assert storage.load_document(data_dir, "bob") != document
    assert not list((tmp_path / "users").glob("*.tmp"))


def test_corrupt_document_falls_back(tmp_path):
    data_dir = storage.ensure_data_files(str(tmp_path))
    (tmp_path / "users" / "ana.json").write_text("{not json")
    assert storage.load_document(data_dir, "ana") == storage.new_document()


def test_user_key_cannot_escape_data_dir(tmp_path, document):
    data_dir = storage.ensure_data_files(str(tmp_path))
    storage.save_document(data_dir, "../evil", document)
    assert not (tmp_path / "evil.json").exists()
    assert storage.load_document(data_dir, "../evil") == document


def test_drafts(tmp_path):
    data_dir = storage.ensure_data_files(str(tmp_path))
    assert storage.load_draft(data_dir, "sessions", "ana") is None
    storage.save_draft(data_dir, "sessions", "ana", {"state": "in_progress"})
    assert storage.load_draft(data_dir, "sessions", "ana") == {"state": "in_progress"}
    storage.clear_draft(data_dir, "sessions", "ana")
    storage.clear_draft(data_dir, "sessions", "ana")
    assert storage.load_draft(data_dir, "sessions", "ana") is None


def test_settings_merge_defaults(tmp_path):
    data_dir = storage.ensure_data_files(str(tmp_path))
    path = tmp_path / "settings.json"
    assert storage.load_settings(str(path)) == DEFAULT_SETTINGS

    path.write_text(json.dumps({"progress_points": 5}))
    settings = storage.load_settings(str(path))
    assert settings["progress_points"] == 5
    assert settings["default_rest_seconds"] == DEFAULT_SETTINGS["default_rest_seconds"]

    storage.save_settings(str(path), {"progress_points": 3, "default_rest_seconds": 90})
    assert storage.load_settings(str(path))["default_rest_seconds"] == 90
    assert data_dir == str(tmp_path)
