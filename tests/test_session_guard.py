import pytest

from acct.auth.session import SessionGuard, SessionState


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/", "/login"),
        ("/profile", "/login"),
        ("/orders", "/login"),
        ("/profile/password", "/login"),
        ("/login", None),
        ("/register", None),
        ("/forgot-password", None),
    ],
)
def test_anonymous_redirects(store, path, expected):
    assert SessionGuard(store).redirect_for(path) == expected


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/", "/profile"),
        ("/profile", None),
        ("/orders", None),
        ("/login", "/profile"),
        ("/register/", "/profile"),
        ("/forgot-password", None),
    ],
)
def test_authenticated_redirects(registered, path, expected):
    assert SessionGuard(registered).redirect_for(path) == expected


def test_state_follows_store_without_caching(store):
    guard = SessionGuard(store)
    assert guard.state() is SessionState.ANONYMOUS
    store.register("A", "B", "a@b.com", "secret1", "secret1")
    assert guard.is_authorized()
    assert guard.state() is SessionState.AUTHENTICATED
    store.logout()
    assert guard.state() is SessionState.ANONYMOUS
    store.login("a@b.com", "secret1")
    assert guard.is_authorized()


def test_logout_always_unauthorizes(store):
    guard = SessionGuard(store)
    store.logout()
    assert guard.is_authorized() is False
