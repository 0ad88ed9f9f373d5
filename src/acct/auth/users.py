# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

# camelCase keys of the persisted JSON form
_JSON_KEYS = {
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "password": "password",
    "phone": "phone",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC with milliseconds and a Z suffix (2024-03-15T10:00:00.000Z)."""
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class UserRecord:
    email: str
    password: str
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    created_at: str = ""
    updated_at: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> Dict[str, str]:
        out = {_JSON_KEYS[k]: getattr(self, k) for k in _JSON_KEYS}
        if not out["updatedAt"]:
            # a record that was never mutated has no updatedAt, as on registration
            del out["updatedAt"]
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserRecord":
        kwargs = {}
        for attr, key in _JSON_KEYS.items():
            v = data.get(key)
            kwargs[attr] = "" if v is None else str(v)
        return cls(**kwargs)

    def updated(self, **changes: str) -> "UserRecord":
        return replace(self, **changes)

    def last_modified(self) -> str:
        return self.updated_at or self.created_at


def dump_accounts(records: Iterable[UserRecord]) -> str:
    return json.dumps({r.email: r.to_dict() for r in records})


def load_accounts(raw: Optional[str]) -> Dict[str, UserRecord]:
    """Parse the `accounts` slot. Malformed entries are skipped, never fatal."""
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    if not isinstance(data, dict):
        return {}
    out: Dict[str, UserRecord] = {}
    for email, udata in data.items():
        if not isinstance(udata, dict):
            continue
        rec = UserRecord.from_dict({**udata, "email": udata.get("email") or email})
        if not rec.email:
            continue
        out[rec.email] = rec
    return out


def load_record(raw: Optional[str]) -> Optional[UserRecord]:
    """Parse a single serialised record (the legacy `user` slot)."""
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict) or not data.get("email"):
        return None
    return UserRecord.from_dict(data)


def load_record_list(raw: Optional[str]) -> List[UserRecord]:
    """Parse a serialised sequence of records (the legacy `users` slot)."""
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return []
    if not isinstance(data, list):
        return []
    return [UserRecord.from_dict(d) for d in data if isinstance(d, dict) and d.get("email")]
