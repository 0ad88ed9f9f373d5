# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from enum import Enum
from typing import Optional

from acct.auth.store import CredentialStore

LOGIN_PATH = "/login"
HOME_PATH = "/profile"

PROTECTED_PATHS = frozenset({"/profile", "/orders"})
GUEST_ONLY_PATHS = frozenset({"/login", "/register"})


def _under(path: str, roots: frozenset) -> bool:
    return any(path == r or path.startswith(r + "/") for r in roots)


class SessionState(Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class SessionGuard:
    """Decides whether a view may render, from the persisted session flag.

    Nothing is cached here: every decision re-reads the store, so a reload
    resumes in whatever state was last persisted.
    """

    def __init__(self, store: CredentialStore) -> None:
        self.store = store

    def is_authorized(self) -> bool:
        return self.store.is_authenticated()

    def state(self) -> SessionState:
        return SessionState.AUTHENTICATED if self.is_authorized() else SessionState.ANONYMOUS

    def redirect_for(self, path: str) -> Optional[str]:
        """Return where to send a request for `path`, or None to render it."""
        p = "/" + (path or "").strip("/")
        authorized = self.is_authorized()
        if p == "/":
            return HOME_PATH if authorized else LOGIN_PATH
        if _under(p, PROTECTED_PATHS) and not authorized:
            return LOGIN_PATH
        if p in GUEST_ONLY_PATHS and authorized:
            return HOME_PATH
        return None
