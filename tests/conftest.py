import os
import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

import importlib
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from acct.auth.store import CredentialStore
from acct.infra.kv_store import KeyValueStore


@pytest.fixture()
def storage_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "storage.yml"


@pytest.fixture()
def clock():
    """A clock that advances one second per reading, starting 2024-03-15 10:00 UTC."""
    state = {"now": datetime(2024, 3, 15, 10, 0, 0, tzinfo=timezone.utc)}

    def _now() -> datetime:
        state["now"] += timedelta(seconds=1)
        return state["now"]

    return _now


@pytest.fixture()
def kv(storage_path: Path) -> KeyValueStore:
    return KeyValueStore(storage_path)


@pytest.fixture()
def store(kv: KeyValueStore, clock) -> CredentialStore:
    return CredentialStore(kv, hash_passwords=False, now=clock)


@pytest.fixture()
def registered(store: CredentialStore):
    """Store holding one signed-in account: a@b.com / secret1."""
    store.register("Ada", "Byron", "a@b.com", "secret1", "secret1", "555-0100")
    return store


@pytest.fixture()
def client(storage_path: Path, monkeypatch):
    from fastapi.testclient import TestClient

    monkeypatch.setenv("ACCT_STORAGE_PATH", str(storage_path))
    monkeypatch.setenv("ACCT_HASH_PASSWORDS", "false")

    import acct.app as app_module
    importlib.reload(app_module)

    with TestClient(app_module.app) as c:
        yield c
