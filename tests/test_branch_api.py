import pytest


@pytest.fixture
def branch(fake_supabase, admins, auth_headers):
    fake_supabase.seed(
        "washers",
        {"id": "w-1", "name": "Sam", "branch_id": "br-1", "status": "active"},
        {"id": "w-2", "name": "Lee", "branch_id": "br-2", "status": "active"},
    )
    fake_supabase.seed(
        "branch_hours",
        {"id": "h-2", "branch_id": "br-2", "day_of_week": 1, "open_time": "09:00",
         "close_time": "17:00", "is_closed": False, "specific_date": None},
    )
    return auth_headers(admins.branch)


def test_branch_info(client, branch):
    response = client.get("/branch/api/branch", headers=branch)
    assert response.get_json()["data"]["name"] == "Downtown"


def test_branch_link_falls_back_to_branch_admin_column(client, fake_supabase, admins, auth_headers):
    fake_supabase.tables["branch_admins"] = []
    fake_supabase.tables["branches"][1]["admin_id"] = admins.branch
    response = client.get("/branch/api/branch", headers=auth_headers(admins.branch))
    assert response.get_json()["data"]["id"] == "br-2"


def test_unlinked_branch_admin_is_refused(client, fake_supabase, admins, auth_headers):
    fake_supabase.tables["branch_admins"] = []
    response = client.get("/branch/api/branch", headers=auth_headers(admins.branch))
    assert response.status_code == 403
    assert response.get_json()["error"] == "No branch is linked to this account"


def test_week_hours_fill_in_defaults(client, branch):
    response = client.get("/branch/api/hours", headers=branch)
    week = response.get_json()["data"]
    assert len(week) == 7
    assert all(day["id"].startswith("default-br-1-") for day in week)


def test_two_week_hours(client, branch):
    response = client.get("/branch/api/hours?range=two-weeks&start=2024-06-03", headers=branch)
    days = response.get_json()["data"]
    assert len(days) == 14
    assert days[0]["specific_date"] == "2024-06-03"
    bad = client.get("/branch/api/hours?range=two-weeks&start=June", headers=branch)
    assert bad.status_code == 400


def test_saving_hours_is_bound_to_own_branch(client, branch, fake_supabase):
    response = client.put(
        "/branch/api/hours",
        json={"branch_id": "br-2", "day_of_week": 2, "open_time": "08:00", "close_time": "16:00"},
        headers=branch,
    )
    assert response.status_code == 200
    saved = response.get_json()["data"]
    assert saved["branch_id"] == "br-1"
    assert saved["open_time"] == "08:00"


def test_hours_of_other_branch_are_untouchable(client, branch, fake_supabase):
    update = client.put(
        "/branch/api/hours",
        json={"id": "h-2", "branch_id": "br-1", "day_of_week": 1, "is_closed": True},
        headers=branch,
    )
    delete = client.delete("/branch/api/hours/h-2", headers=branch)
    assert update.status_code == 404
    assert delete.status_code == 404
    assert fake_supabase.tables["branch_hours"][0]["is_closed"] is False


def test_deleting_default_hours_closes_the_day(client, branch):
    response = client.delete("/branch/api/hours/default-br-1-3", headers=branch)
    data = response.get_json()["data"]
    assert data["is_closed"] is True
    assert data["day_of_week"] == 3


def test_invalid_hours_time(client, branch):
    response = client.put(
        "/branch/api/hours",
        json={"day_of_week": 2, "open_time": "25:00"},
        headers=branch,
    )
    assert response.status_code == 400


def test_washers_are_created_in_own_branch(client, branch, fake_supabase):
    response = client.post(
        "/branch/api/washers", json={"name": "Kim", "branch_id": "br-2"}, headers=branch
    )
    assert response.status_code == 201
    assert response.get_json()["data"]["branch_id"] == "br-1"

    listed = client.get("/branch/api/washers", headers=branch).get_json()["data"]
    assert [washer["name"] for washer in listed] == ["Kim", "Sam"]


def test_schedules_follow_washer_ownership(client, branch, fake_supabase):
    own = client.post(
        "/branch/api/schedules",
        json={"washer_id": "w-1", "day_of_week": 1, "start_time": "08:00", "end_time": "12:00"},
        headers=branch,
    )
    foreign = client.post(
        "/branch/api/schedules",
        json={"washer_id": "w-2", "day_of_week": 1, "start_time": "08:00", "end_time": "12:00"},
        headers=branch,
    )
    assert own.status_code == 201
    assert foreign.status_code == 404

    schedule_id = own.get_json()["data"]["id"]
    deleted = client.delete(f"/branch/api/schedules/{schedule_id}", headers=branch)
    assert deleted.status_code == 200
    assert fake_supabase.tables["washer_schedules"] == []


def test_bookings_of_other_branches_are_hidden(client, branch, fake_supabase):
    fake_supabase.seed(
        "bookings",
        {"id": "bk-1", "branch_id": "br-1", "status": "pending"},
        {"id": "bk-2", "branch_id": "br-2", "status": "pending"},
    )
    listed = client.get("/branch/api/bookings", headers=branch).get_json()["data"]
    refused = client.put(
        "/branch/api/bookings/bk-2/status", json={"status": "completed"}, headers=branch
    )
    assert [booking["id"] for booking in listed["bookings"]] == ["bk-1"]
    assert refused.status_code == 404
