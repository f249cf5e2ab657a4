from werkzeug.security import check_password_hash

import add_user


def test_add_user_hashes_password(tmp_path):
    path = str(tmp_path / "users.json")
    users = add_user.load_users(path)
    assert users == {}

    assert add_user.add_user(users, "ana", "secret", "Ana") is None
    add_user.save_users(users, path)

    stored = add_user.load_users(path)
    assert stored["ana"]["name"] == "Ana"
    assert check_password_hash(stored["ana"]["password_hash"], "secret")


def test_add_user_rejections():
    users = {"ana": {}}
    assert add_user.add_user(users, "", "x") == "Username cannot be empty."
    assert "already exists" in add_user.add_user(users, "ana", "x")
    assert add_user.add_user(users, "bob", "") == "Password cannot be empty."
