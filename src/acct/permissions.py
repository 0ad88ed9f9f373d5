# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from fastapi import HTTPException, Request

from acct.auth.session import LOGIN_PATH, SessionGuard
from acct.auth.store import CredentialStore
from acct.auth.users import UserRecord


def get_store(request: Request) -> CredentialStore:
    return request.app.state.store


def get_guard(request: Request) -> SessionGuard:
    return SessionGuard(get_store(request))


def _redirect(location: str) -> HTTPException:
    return HTTPException(status_code=303, headers={"Location": location})


def require_user(request: Request) -> UserRecord:
    """Dependency for protected views: the signed-in account, or a redirect to login."""
    guard = get_guard(request)
    user = guard.store.current_user() if guard.is_authorized() else None
    if user is None:
        raise _redirect(LOGIN_PATH)
    return user


def redirect_authenticated(request: Request) -> None:
    """Dependency for login/registration views: send signed-in users home."""
    target = get_guard(request).redirect_for(request.url.path)
    if target:
        raise _redirect(target)
