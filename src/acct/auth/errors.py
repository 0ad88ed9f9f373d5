# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional


class AccountError(Exception):
    """Base error for account operations; `message` is shown to the user as-is."""

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationError(AccountError):
    pass


class AuthError(AccountError):
    pass


class NotFoundError(AccountError):
    pass
