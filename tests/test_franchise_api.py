import pytest


@pytest.fixture
def network(fake_supabase, admins):
    fake_supabase.seed(
        "washers",
        {"id": "w-1", "name": "Sam", "branch_id": "br-1", "status": "active"},
        {"id": "w-2", "name": "Lee", "branch_id": "br-2", "status": "active"},
    )
    fake_supabase.seed(
        "bookings",
        {"id": "bk-1", "branch_id": "br-1", "status": "completed"},
        {"id": "bk-2", "branch_id": "br-1", "status": "pending"},
        {"id": "bk-3", "branch_id": "br-2", "status": "pending"},
    )
    fake_supabase.seed(
        "payments",
        {"booking_id": "bk-1", "amount": 30, "status": "succeeded"},
        {"booking_id": "bk-2", "amount": 20, "status": "pending"},
        {"booking_id": "bk-3", "amount": 99, "status": "succeeded"},
    )
    return fake_supabase


def test_dashboard_counts_own_franchise_only(client, admins, auth_headers, network):
    response = client.get("/franchise/api/dashboard", headers=auth_headers(admins.franchise))
    data = response.get_json()["data"]
    assert data["branches"] == 1
    assert data["washers"] == 1
    assert data["bookings"]["total"] == 2
    assert data["bookings"]["pending"] == 1
    assert data["revenue"] == 30.0


def test_bookings_are_scoped(client, admins, auth_headers, network):
    response = client.get("/franchise/api/bookings", headers=auth_headers(admins.franchise))
    bookings = response.get_json()["data"]["bookings"]
    assert {booking["id"] for booking in bookings} == {"bk-1", "bk-2"}


def test_booking_of_other_franchise_cannot_be_updated(client, admins, auth_headers, network):
    response = client.put(
        "/franchise/api/bookings/bk-3/status",
        json={"status": "completed"},
        headers=auth_headers(admins.franchise),
    )
    assert response.status_code == 404
    assert network.tables["bookings"][2]["status"] == "pending"


def test_booking_status_update(client, admins, auth_headers, network):
    response = client.put(
        "/franchise/api/bookings/bk-2/status",
        json={"status": "in-progress"},
        headers=auth_headers(admins.franchise),
    )
    assert response.status_code == 200
    assert response.get_json()["message"] == "Booking status updated"


def test_washer_must_join_an_own_branch(client, admins, auth_headers, network):
    headers = auth_headers(admins.franchise)
    refused = client.post(
        "/franchise/api/washers", json={"name": "Kim", "branch_id": "br-2"}, headers=headers
    )
    created = client.post(
        "/franchise/api/washers", json={"name": "Kim", "branch_id": "br-1"}, headers=headers
    )
    assert refused.status_code == 404
    assert created.status_code == 201
    assert created.get_json()["data"]["status"] == "active"


def test_washer_of_other_franchise_cannot_be_deleted(client, admins, auth_headers, network):
    response = client.delete("/franchise/api/washers/w-2", headers=auth_headers(admins.franchise))
    assert response.status_code == 404
    assert len(network.tables["washers"]) == 2


def test_general_admin_cannot_use_franchise_api(client, admins, auth_headers):
    response = client.get("/franchise/api/dashboard", headers=auth_headers(admins.general))
    assert response.status_code == 403
