def _login(client, email, role="admin", password="password123"):
    return client.post("/auth/login", json={"email": email, "password": password, "role": role})


def test_general_admin_login_sets_session_cookies(client, admins):
    response = _login(client, "General@Test.com")

    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "success"
    assert body["data"]["redirect_to"] == "/admin"
    assert body["data"]["franchise_id"] is None
    cookies = response.headers.getlist("Set-Cookie")
    assert any(cookie.startswith("sb-access-token=") and "HttpOnly" in cookie for cookie in cookies)
    assert any(cookie.startswith("sb-refresh-token=") for cookie in cookies)


def test_franchise_owner_logs_in_to_franchise_dashboard(client, admins):
    response = _login(client, "franchise@test.com", role="franchise")
    assert response.status_code == 200
    assert response.get_json()["data"]["franchise_id"] == "fr-1"
    assert response.get_json()["data"]["redirect_to"] == "/franchise"


def test_franchise_owner_is_refused_on_admin_login(client, admins, fake_supabase):
    response = _login(client, "franchise@test.com", role="admin")
    assert response.status_code == 403
    assert "franchise login" in response.get_json()["error"].lower()
    assert fake_supabase.auth.sign_outs == 1


def test_general_admin_is_refused_on_franchise_login(client, admins):
    response = _login(client, "general@test.com", role="franchise")
    assert response.status_code == 403


def test_wrong_password(client, admins):
    response = _login(client, "general@test.com", password="nope")
    assert response.status_code == 401
    assert response.get_json()["error"] == "Invalid email or password. Please try again."


def test_user_without_admin_profile_is_refused(client, admins, fake_supabase):
    fake_supabase.auth.add_user("customer@test.com", "password123")
    response = _login(client, "customer@test.com")
    assert response.status_code == 403
    assert fake_supabase.auth.sign_outs == 1


def test_branch_login_requires_branch_role(client, admins):
    ok = client.post(
        "/auth/branch-login", json={"email": "branch@test.com", "password": "password123"}
    )
    refused = client.post(
        "/auth/branch-login", json={"email": "general@test.com", "password": "password123"}
    )
    assert ok.status_code == 200
    assert ok.get_json()["data"]["redirect_to"] == "/branch"
    assert refused.status_code == 403


def test_me_reports_the_dashboard(client, admins, auth_headers):
    response = client.get("/auth/me", headers=auth_headers(admins.franchise))
    data = response.get_json()["data"]
    assert data["role"] == "franchise"
    assert data["franchise_id"] == "fr-1"
    assert data["redirect_to"] == "/franchise"


def test_me_requires_a_token(client):
    assert client.get("/auth/me").status_code == 401


def test_expired_token_is_ignored(client, admins):
    from conftest import make_token

    headers = {"Authorization": f"Bearer {make_token(admins.general, expires_in=-60)}"}
    assert client.get("/auth/me", headers=headers).status_code == 401


def test_logout_revokes_and_clears_cookies(client, admins, auth_headers, fake_supabase):
    headers = auth_headers(admins.general)
    response = client.post("/auth/logout", headers=headers)

    assert response.status_code == 200
    assert fake_supabase.auth.admin.signed_out == [headers["Authorization"][7:]]
    cookies = response.headers.getlist("Set-Cookie")
    assert any(cookie.startswith("sb-access-token=;") for cookie in cookies)


def test_preferences_round_trip(client):
    saved = client.post("/auth/preferences", json={"key": "theme", "value": "dark"})
    assert saved.status_code == 200
    assert any(c.startswith("theme=dark") for c in saved.headers.getlist("Set-Cookie"))

    client.set_cookie("NEXT_LOCALE", "ar")
    response = client.get("/auth/preferences")
    data = response.get_json()["data"]
    assert data == {"NEXT_LOCALE": "ar", "theme": "dark", "sidebar_state": "expanded"}


def test_unknown_preference_is_rejected(client):
    response = client.post("/auth/preferences", json={"key": "theme", "value": "neon"})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Unknown preference 'theme'"
