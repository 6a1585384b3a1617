def test_invalid_body_lists_field_errors(client):
    response = client.post("/auth/login", json={"email": "not-an-email"})
    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "Invalid data"
    fields = {error["loc"][0] for error in body["details"]["details"]}
    assert fields == {"email", "password"}


def test_unknown_route_uses_the_envelope(client):
    response = client.get("/nowhere")
    assert response.status_code == 404
    assert response.get_json() == {"status": "error", "data": None, "error": "Resource not found"}


def test_wrong_method(client):
    response = client.post("/api/health")
    assert response.status_code == 405
    assert response.get_json()["error"] == "Method not allowed"


def test_no_rows_error_becomes_404(client, admins, auth_headers, fake_supabase):
    fake_supabase.fail_next("franchises", message="no rows", code="PGRST116")
    response = client.get("/admin/api/franchises", headers=auth_headers(admins.general))
    assert response.status_code == 404


def test_other_supabase_errors_become_502(client, admins, auth_headers, fake_supabase):
    fake_supabase.fail_next("franchises", message="relation does not exist", code="42P01")
    response = client.get("/admin/api/franchises", headers=auth_headers(admins.general))
    assert response.status_code == 502
    assert response.get_json()["error"] == "relation does not exist"


def test_health_check(client, fake_supabase):
    fake_supabase.storage.buckets.add("images")
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json()["data"]["buckets"] == ["images"]


def test_health_check_reports_database_failure(client, fake_supabase):
    fake_supabase.fail_next("admins")
    response = client.get("/api/health")
    assert response.status_code == 503
    assert response.get_json()["details"] == {"step": "database"}


def test_fix_storage_policies_requires_general_admin(client, admins, auth_headers):
    response = client.post("/api/fix-storage-policies", headers=auth_headers(admins.franchise))
    assert response.status_code == 403
