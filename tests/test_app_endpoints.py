import yaml


REGISTRATION = {
    "firstName": "Ada",
    "lastName": "Byron",
    "email": "a@b.com",
    "phone": "555-0100",
    "password": "secret1",
    "confirmPassword": "secret1",
}


def _register(client, **overrides):
    return client.post("/register", data={**REGISTRATION, **overrides}, follow_redirects=False)


def test_protected_views_redirect_to_login(client):
    for path in ("/", "/profile", "/orders"):
        r = client.get(path, follow_redirects=False)
        assert r.status_code == 303
        assert r.headers["location"] == "/login"


def test_register_signs_in_and_persists(client, storage_path):
    r = _register(client)
    assert r.status_code == 303
    assert r.headers["location"] == "/profile"

    r = client.get("/profile")
    assert r.status_code == 200
    assert "Ada Byron" in r.text
    assert 'class="avatar"' in r.text

    raw = yaml.safe_load(storage_path.read_text(encoding="utf-8"))
    assert raw["isAuthenticated"] == "true"
    assert raw["currentUser"] == "a@b.com"


def test_register_shows_field_errors(client):
    r = _register(client, firstName="", confirmPassword="secret2")
    assert r.status_code == 400
    assert "First name is required" in r.text
    assert "Passwords do not match" in r.text


def test_register_short_password(client):
    r = _register(client, password="abc", confirmPassword="abc")
    assert r.status_code == 400
    assert "at least 6 characters" in r.text


def test_register_duplicate_email(client):
    _register(client)
    client.post("/logout")
    r = _register(client)
    assert r.status_code == 400
    assert "Email already registered" in r.text


def test_login_pages_redirect_when_signed_in(client):
    _register(client)
    for path in ("/login", "/register", "/"):
        r = client.get(path, follow_redirects=False)
        assert r.status_code == 303
        assert r.headers["location"] == "/profile"
    assert client.get("/forgot-password").status_code == 200


def test_logout_then_login(client):
    _register(client)
    r = client.post("/logout", follow_redirects=False)
    assert r.headers["location"] == "/login"
    assert client.get("/profile", follow_redirects=False).status_code == 303

    r = client.post("/login", data={"email": "a@b.com", "password": "wrong11"})
    assert r.status_code == 400
    assert "Invalid email or password" in r.text
    assert client.get("/profile", follow_redirects=False).status_code == 303

    r = client.post("/login", data={"email": "a@b.com", "password": "secret1"}, follow_redirects=False)
    assert r.headers["location"] == "/profile"
    assert client.get("/profile").status_code == 200


def test_profile_update(client):
    _register(client)
    r = client.post(
        "/profile",
        data={"firstName": "Augusta", "lastName": "King", "email": "a@b.com", "phone": "555-0199"},
        follow_redirects=False,
    )
    assert r.status_code == 303
    r = client.get(r.headers["location"])
    assert "Augusta King" in r.text
    assert "Profile updated" in r.text


def test_profile_update_requires_phone(client):
    _register(client)
    r = client.post("/profile", data={"firstName": "Ada", "lastName": "Byron", "email": "a@b.com", "phone": ""})
    assert r.status_code == 400
    assert "Phone number is required" in r.text


def test_change_password(client):
    _register(client)
    r = client.post(
        "/profile/password",
        data={"oldPassword": "secret1", "newPassword": "xyz999", "confirmPassword": "xyz000"},
    )
    assert r.status_code == 400
    assert "New passwords do not match" in r.text

    r = client.post(
        "/profile/password",
        data={"oldPassword": "secret1", "newPassword": "xyz999", "confirmPassword": "xyz999"},
    )
    assert r.status_code == 200
    assert "Password updated" in r.text

    client.post("/logout")
    r = client.post("/login", data={"email": "a@b.com", "password": "xyz999"}, follow_redirects=False)
    assert r.headers["location"] == "/profile"


def test_change_password_requires_session(client):
    _register(client)
    client.post("/logout")
    r = client.post(
        "/profile/password",
        data={"oldPassword": "secret1", "newPassword": "xyz999", "confirmPassword": "xyz999"},
        follow_redirects=False,
    )
    assert r.status_code == 303
    assert r.headers["location"] == "/login"


def test_forgot_password(client):
    _register(client)
    client.post("/logout")

    r = client.post(
        "/forgot-password",
        data={"email": "nobody@x.io", "newPassword": "fresh123", "confirmPassword": "fresh123"},
    )
    assert r.status_code == 400
    assert "No account found with this email address" in r.text

    r = client.post(
        "/forgot-password",
        data={"email": "a@b.com", "newPassword": "fresh123", "confirmPassword": "fresh123"},
    )
    assert r.status_code == 200
    assert "Password has been reset successfully!" in r.text

    r = client.post("/login", data={"email": "a@b.com", "password": "fresh123"}, follow_redirects=False)
    assert r.headers["location"] == "/profile"


def test_orders_filter(client):
    _register(client)
    r = client.get("/orders")
    assert r.status_code == 200
    assert "ORD-2024-001" in r.text and "ORD-2024-005" in r.text

    r = client.get("/orders", params={"status": "Cancelled"})
    assert "ORD-2024-003" in r.text
    assert "ORD-2024-001" not in r.text

    r = client.get("/orders", params={"status": "Unknown"})
    assert "ORD-2024-001" in r.text


def test_storage_writes_run_on_the_event_loop(client):
    import inspect

    import acct.app as app_module

    for handler in (
        app_module.login_post,
        app_module.logout_post,
        app_module.register_post,
        app_module.forgot_password_post,
        app_module.profile_update,
        app_module.profile_password,
    ):
        assert inspect.iscoroutinefunction(handler), handler.__name__
