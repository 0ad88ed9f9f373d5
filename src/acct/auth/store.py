# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Credential store: accounts and the session flag over key-value storage.

Storage slots:
- `accounts`: JSON object, email -> account record (the only account source)
- `currentUser`: email of the account the session belongs to
- `isAuthenticated`: "true" while signed in, absent otherwise

The flag is a navigation convenience readable and writable by the same user it
gates. It is not an access control.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from acct.auth.errors import AuthError, ValidationError, NotFoundError
from acct.auth.passwords import check_password, hash_password, hashing_enabled, validate_new_password
from acct.auth.users import (
    UserRecord,
    dump_accounts,
    load_accounts,
    load_record,
    load_record_list,
    utc_timestamp,
)
from acct.infra.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

ACCOUNTS_KEY = "accounts"
CURRENT_USER_KEY = "currentUser"
SESSION_FLAG_KEY = "isAuthenticated"

# Slots written by earlier versions; folded into ACCOUNTS_KEY on startup.
LEGACY_USER_KEY = "user"
LEGACY_USERS_KEY = "users"


class CredentialStore:
    def __init__(
        self,
        kv: KeyValueStore,
        *,
        hash_passwords: Optional[bool] = None,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.kv = kv
        self.hash_passwords = hashing_enabled() if hash_passwords is None else hash_passwords
        self._now = now or (lambda: datetime.now(timezone.utc))
        self._migrate_legacy_slots()
        self._repair_session_flag()

    # ------------------ storage ------------------

    def _accounts(self) -> Dict[str, UserRecord]:
        return load_accounts(self.kv.get_item(ACCOUNTS_KEY))

    def _save_accounts(self, accounts: Dict[str, UserRecord]) -> None:
        self.kv.set_item(ACCOUNTS_KEY, dump_accounts(accounts.values()))

    def _timestamp(self) -> str:
        return utc_timestamp(self._now())

    def _stored_password(self, plain: str) -> str:
        return hash_password(plain) if self.hash_passwords else plain

    def _start_session(self, email: str) -> None:
        self.kv.set_item(CURRENT_USER_KEY, email)
        self.kv.set_item(SESSION_FLAG_KEY, "true")

    def _migrate_legacy_slots(self) -> None:
        if LEGACY_USER_KEY not in self.kv and LEGACY_USERS_KEY not in self.kv:
            return

        active = load_record(self.kv.get_item(LEGACY_USER_KEY))
        legacy: Dict[str, UserRecord] = {}
        # The active record goes last so it wins ties against the list copy.
        for rec in load_record_list(self.kv.get_item(LEGACY_USERS_KEY)) + ([active] if active else []):
            prev = legacy.get(rec.email)
            if prev is None or rec.last_modified() >= prev.last_modified():
                legacy[rec.email] = rec

        accounts = self._accounts()
        for email, rec in legacy.items():
            prev = accounts.get(email)
            if prev is None or rec.last_modified() > prev.last_modified():
                accounts[email] = rec

        self._save_accounts(accounts)
        if active and not self.kv.get_item(CURRENT_USER_KEY):
            self.kv.set_item(CURRENT_USER_KEY, active.email)
        self.kv.remove_item(LEGACY_USER_KEY)
        self.kv.remove_item(LEGACY_USERS_KEY)
        logger.info("Migrated %d legacy account record(s)", len(legacy))

    def _repair_session_flag(self) -> None:
        if self.is_authenticated() and self.current_user() is None:
            logger.warning("Session flag set without an account; clearing it")
            self.kv.remove_item(SESSION_FLAG_KEY)

    # ------------------ queries ------------------

    def is_authenticated(self) -> bool:
        return self.kv.get_item(SESSION_FLAG_KEY) == "true"

    def current_user(self) -> Optional[UserRecord]:
        email = self.kv.get_item(CURRENT_USER_KEY)
        if not email:
            return None
        return self._accounts().get(email)

    def get_account(self, email: str) -> Optional[UserRecord]:
        return self._accounts().get(email)

    def account_count(self) -> int:
        return len(self._accounts())

    # ------------------ operations ------------------

    def create_account(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        confirm_password: str,
        phone: str = "",
    ) -> UserRecord:
        """Validate and store a new account without touching the session slots."""
        if not first_name:
            raise ValidationError("First name is required", field="firstName")
        if not last_name:
            raise ValidationError("Last name is required", field="lastName")
        if not email:
            raise ValidationError("Email is required", field="email")
        if not password:
            raise ValidationError("Password is required", field="password")
        validate_new_password(password, confirm_password, length_field="password")

        accounts = self._accounts()
        if email in accounts:
            raise ValidationError("Email already registered", field="email")

        rec = UserRecord(
            email=email,
            password=self._stored_password(password),
            first_name=first_name,
            last_name=last_name,
            phone=phone or "",
            created_at=self._timestamp(),
        )
        accounts[email] = rec
        self._save_accounts(accounts)
        logger.info("Created account %s", email)
        return rec

    def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        confirm_password: str,
        phone: str = "",
    ) -> UserRecord:
        rec = self.create_account(first_name, last_name, email, password, confirm_password, phone)
        self._start_session(email)
        logger.info("Registered account %s", email)
        return rec

    def login(self, email: str, password: str) -> UserRecord:
        rec = self._accounts().get(email)
        if rec is None or not check_password(rec.password, password):
            logger.warning("Rejected login for %s", email)
            raise AuthError("Invalid email or password")
        self._start_session(email)
        logger.info("Logged in %s", email)
        return rec

    def logout(self) -> None:
        if self.is_authenticated():
            logger.info("Logged out %s", self.kv.get_item(CURRENT_USER_KEY))
        self.kv.remove_item(SESSION_FLAG_KEY)

    def _require_current(self) -> UserRecord:
        rec = self.current_user() if self.is_authenticated() else None
        if rec is None:
            raise ValidationError("No account is signed in")
        return rec

    def update_profile(
        self,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> UserRecord:
        """Merge the given fields over the signed-in account; None keeps a field."""
        rec = self._require_current()
        accounts = self._accounts()

        new_email = rec.email if email is None else email
        if not new_email:
            raise ValidationError("Email is required", field="email")
        if new_email != rec.email and new_email in accounts:
            raise ValidationError("Email already registered", field="email")

        changes = {"first_name": first_name, "last_name": last_name, "email": email, "phone": phone}
        updated = rec.updated(
            **{k: v for k, v in changes.items() if v is not None},
            updated_at=self._timestamp(),
        )

        if updated.email != rec.email:
            del accounts[rec.email]
        accounts[updated.email] = updated
        self._save_accounts(accounts)
        if updated.email != rec.email:
            self.kv.set_item(CURRENT_USER_KEY, updated.email)
            logger.info("Account %s renamed to %s", rec.email, updated.email)
        return updated

    def change_password(self, old_password: str, new_password: str, confirm_password: str) -> UserRecord:
        rec = self._require_current()
        validate_new_password(
            new_password,
            confirm_password,
            mismatch_message="New passwords do not match",
            length_message="New password must be at least 6 characters long",
        )
        if not check_password(rec.password, old_password):
            raise AuthError("Current password is incorrect", field="oldPassword")

        accounts = self._accounts()
        updated = rec.updated(password=self._stored_password(new_password), updated_at=self._timestamp())
        accounts[rec.email] = updated
        self._save_accounts(accounts)
        logger.info("Password changed for %s", rec.email)
        return updated

    def reset_password(self, email: str, new_password: str, confirm_password: str) -> UserRecord:
        validate_new_password(
            new_password,
            confirm_password,
            mismatch_message="Passwords do not match",
        )
        accounts = self._accounts()
        rec = accounts.get(email)
        if rec is None:
            raise NotFoundError("No account found with this email address", field="email")

        updated = rec.updated(password=self._stored_password(new_password), updated_at=self._timestamp())
        accounts[email] = updated
        self._save_accounts(accounts)
        logger.info("Password reset for %s", email)
        return updated
