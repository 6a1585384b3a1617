from datetime import date

from washdesk_shared.services import branch_hours_service


def test_week_defaults_close_weekends():
    week = branch_hours_service.resolve_week([], "br-1")
    assert [day["day_of_week"] for day in week] == list(range(7))
    assert week[0]["is_closed"] and week[6]["is_closed"]
    assert not week[3]["is_closed"]
    assert week[3]["id"] == "default-br-1-3"
    assert week[3]["open_time"] == "09:00" and week[3]["close_time"] == "17:00"


def test_specific_row_beats_weekly_row():
    rows = [
        {"id": "w2", "branch_id": "br-1", "day_of_week": 2, "open_time": "08:00",
         "close_time": "18:00", "is_closed": False, "specific_date": None},
        {"id": "s2", "branch_id": "br-1", "day_of_week": 2, "open_time": "10:00",
         "close_time": "12:00", "is_closed": False, "specific_date": "2024-06-04"},
    ]
    week = branch_hours_service.resolve_week(rows, "br-1")
    assert week[2]["id"] == "s2"


def test_two_weeks_uses_dated_then_weekly_then_default():
    rows = [
        {"id": "w1", "branch_id": "br-1", "day_of_week": 1, "open_time": "07:00",
         "close_time": "19:00", "is_closed": False, "specific_date": None},
        {"id": "s1", "branch_id": "br-1", "day_of_week": 1, "open_time": "10:00",
         "close_time": "14:00", "is_closed": False, "specific_date": "2024-06-10"},
    ]
    days = branch_hours_service.resolve_two_weeks(rows, "br-1", date(2024, 6, 3))
    assert len(days) == 14
    assert days[0]["id"] == "w1" and days[0]["specific_date"] == "2024-06-03"
    assert days[7]["id"] == "s1"
    assert days[1]["id"] == "default-br-1-2-2024-06-04"


def test_saving_a_default_entry_twice_updates_the_row(fake_supabase):
    entry = branch_hours_service.default_hours("br-1", 3)
    entry.update(open_time="08:00")
    first = branch_hours_service.save_hours(entry)

    entry.update(open_time="07:30")
    second = branch_hours_service.save_hours(entry)

    rows = fake_supabase.tables["branch_hours"]
    assert len(rows) == 1
    assert second["id"] == first["id"]
    assert rows[0]["open_time"] == "07:30"


def test_hours_for_date_prefers_specific_row(fake_supabase):
    fake_supabase.seed(
        "branch_hours",
        {"branch_id": "br-1", "day_of_week": 1, "open_time": "07:00", "close_time": "19:00",
         "is_closed": False, "specific_date": None},
        {"branch_id": "br-1", "day_of_week": 1, "open_time": "11:00", "close_time": "13:00",
         "is_closed": False, "specific_date": "2024-06-10"},
    )
    assert branch_hours_service.hours_for_date("br-1", date(2024, 6, 10))["open_time"] == "11:00"
    assert branch_hours_service.hours_for_date("br-1", date(2024, 6, 3))["open_time"] == "07:00"
    assert branch_hours_service.hours_for_date("br-1", date(2024, 6, 4))["id"].startswith(
        "default-"
    )


def test_deleting_a_default_entry_returns_it_closed(fake_supabase):
    closed = branch_hours_service.delete_hours("default-br-1-4", "br-1")
    assert closed["is_closed"] is True
    assert closed["day_of_week"] == 4
    assert closed["open_time"] is None
    assert "branch_hours" not in fake_supabase.tables


def test_malformed_default_id_is_rejected(client, admins, auth_headers):
    response = client.delete(
        "/admin/api/branch-hours/default-br-1-x?branch_id=br-1",
        headers=auth_headers(admins.general),
    )
    assert response.status_code == 400
    assert response.get_json()["error"] == "Invalid hours id"

    out_of_range = client.delete(
        "/admin/api/branch-hours/default-br-1-7?branch_id=br-1",
        headers=auth_headers(admins.general),
    )
    assert out_of_range.status_code == 400


def test_dated_default_id_keeps_its_day(fake_supabase):
    closed = branch_hours_service.delete_hours("default-br-1-2-2024-06-04", "br-1")
    assert closed["day_of_week"] == 2


def test_saving_unknown_hours_row_is_not_found(client, admins, auth_headers):
    response = client.put(
        "/admin/api/branch-hours",
        json={"id": "h-missing", "branch_id": "br-1", "day_of_week": 1},
        headers=auth_headers(admins.general),
    )
    assert response.status_code == 404
    assert response.get_json()["error"] == "Branch hours not found"
