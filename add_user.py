#!/usr/bin/env python3
import os
import json
from getpass import getpass

from werkzeug.security import generate_password_hash

from irontrack_core import USERS_FILE


def load_users(path=USERS_FILE):
    if not os.path.exists(path):
        return {}
    with open(path, "r") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError:
            return {}


def save_users(users, path=USERS_FILE):
    with open(path, "w") as f:
        json.dump(users, f, indent=2)


def add_user(users: dict, username: str, password: str, name: str = ""):
    """Return an error message, or None once the user has been added to ``users``."""
    if not username:
        return "Username cannot be empty."
    if username in users:
        return f"User '{username}' already exists."
    if not password:
        return "Password cannot be empty."

    users[username] = {
        "password_hash": generate_password_hash(password),
        "name": name or username,
    }
    return None


def main():
    users = load_users()

    username = input("New username: ").strip()
    name = input("Display name (default: username): ").strip()
    password = getpass("Password: ")
    confirm = getpass("Confirm password: ")

    if password != confirm:
        print("Passwords do not match.")
        return

    error = add_user(users, username, password, name)
    if error:
        print(error)
        return

    save_users(users)
    print(f"User '{username}' added.")


if __name__ == "__main__":
    main()
