# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Field-level checks for the account forms.

These produce one message per field so the form can be re-rendered with every
problem at once; the credential store still enforces its own rules.
"""

from __future__ import annotations

from typing import Dict, Mapping


def _text(form: Mapping[str, object], key: str) -> str:
    v = form.get(key)
    return "" if v is None else str(v)


def registration_errors(form: Mapping[str, object]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not _text(form, "firstName"):
        errors["firstName"] = "First name is required"
    if not _text(form, "lastName"):
        errors["lastName"] = "Last name is required"
    if not _text(form, "email"):
        errors["email"] = "Email is required"
    if not _text(form, "password"):
        errors["password"] = "Password is required"
    if _text(form, "password") != _text(form, "confirmPassword"):
        errors["confirmPassword"] = "Passwords do not match"
    return errors


def profile_errors(form: Mapping[str, object]) -> Dict[str, str]:
    # The edit form also requires a phone number, unlike registration.
    errors: Dict[str, str] = {}
    if not _text(form, "firstName"):
        errors["firstName"] = "First name is required"
    if not _text(form, "lastName"):
        errors["lastName"] = "Last name is required"
    if not _text(form, "email"):
        errors["email"] = "Email is required"
    if not _text(form, "phone"):
        errors["phone"] = "Phone number is required"
    return errors


def user_initials(email: str) -> str:
    """Up to two initials from the dotted local part of an email (jane.doe@x -> JD)."""
    local = (email or "").split("@")[0]
    return "".join(part[0] for part in local.split(".") if part).upper()[:2]
