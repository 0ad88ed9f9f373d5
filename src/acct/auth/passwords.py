# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from acct.auth.errors import ValidationError

MIN_PASSWORD_LENGTH = 6
HASH_PREFIX = "$argon2"

_PH = PasswordHasher()


def hashing_enabled() -> bool:
    return os.getenv("ACCT_HASH_PASSWORDS", "false").lower() in {"1", "true", "yes", "y"}


def hash_password(plain: str) -> str:
    if not plain:
        raise ValueError("Empty password")
    return _PH.hash(plain)


def is_hashed(stored: str) -> bool:
    return (stored or "").startswith(HASH_PREFIX)


def check_password(stored: str, supplied: str) -> bool:
    """Compare a supplied password against the stored value.

    Stored values that parse as argon2 hashes are verified as hashes; anything
    else is plaintext and must match exactly, including plaintext that merely
    starts with the argon2 prefix.
    """
    if is_hashed(stored) and supplied:
        try:
            return _PH.verify(stored, supplied)
        except VerificationError:
            return False
        except InvalidHashError:
            pass
    return stored == supplied


def validate_new_password(
    new_password: str,
    confirm_password: str,
    *,
    mismatch_message: str = "Passwords don't match",
    length_message: str = "Password must be at least 6 characters long",
    length_field: str = "newPassword",
) -> None:
    if new_password != confirm_password:
        raise ValidationError(mismatch_message, field="confirmPassword")
    if len(new_password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(length_message, field=length_field)
