#!/usr/bin/env python3
"""Create an account in the storage file from the terminal.

Usage:
  python scripts/create_user.py

Stop the web app first: it holds the storage in memory and rewrites the whole
file on its next change, which would drop an account created here.
The new account is not signed in and the current session is left as it was.
"""

from __future__ import annotations

from getpass import getpass

from acct.auth.errors import AccountError
from acct.auth.store import CredentialStore
from acct.infra.kv_store import DEFAULT_STORAGE_PATH, KeyValueStore


def main() -> None:
    with KeyValueStore(DEFAULT_STORAGE_PATH) as kv:
        store = CredentialStore(kv)

        first_name = input("First name: ").strip()
        last_name = input("Last name: ").strip()
        email = input("Email: ").strip()
        phone = input("Phone (optional): ").strip()

        pw1 = getpass("Password: ")
        pw2 = getpass("Repeat password: ")

        try:
            store.create_account(first_name, last_name, email, pw1, pw2, phone)
        except AccountError as e:
            raise SystemExit(e.message)

    print(f"OK -> {DEFAULT_STORAGE_PATH}")


if __name__ == "__main__":
    main()
