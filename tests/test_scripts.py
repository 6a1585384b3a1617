import pytest

from bin.init import link_admins, seed_admins


def test_seed_test_admins_creates_each_role(fake_supabase):
    created = seed_admins.seed_test_admins("password123")
    assert set(created) == {"general@test.com", "franchise@test.com", "branch@test.com"}
    roles = {row["email"]: row["role"] for row in fake_supabase.tables["admins"]}
    assert roles["branch@test.com"] == "branch"


def test_seeding_twice_reuses_accounts(fake_supabase):
    first = seed_admins.seed_test_admins("password123")
    second = seed_admins.seed_test_admins("password123")
    assert first == second
    assert len(fake_supabase.tables["admins"]) == 3


def test_link_franchise_admin_takes_first_free_franchise(fake_supabase, admins):
    linked = link_admins.link_franchise_admin(fake_supabase, "new-owner")
    assert linked == "fr-2"
    assert fake_supabase.tables["franchises"][1]["admin_id"] == "new-owner"
    assert link_admins.link_franchise_admin(fake_supabase, "another") is None


def test_link_branch_admin_creates_a_placeholder(fake_supabase):
    fake_supabase.seed("branches", {"id": "br-9", "name": "Taken", "admin_id": "someone"})
    branch_id = link_admins.link_branch_admin(fake_supabase, "clerk", "clerk@test.com")
    branch = next(row for row in fake_supabase.tables["branches"] if row["id"] == branch_id)
    assert branch["name"] == "Test Branch for clerk@test.com"
    assert branch["admin_id"] == "clerk"


def test_find_admin_id(fake_supabase, admins):
    assert link_admins.find_admin_id(fake_supabase, "general@test.com") == admins.general
    assert link_admins.find_admin_id(fake_supabase, "nobody@test.com") is None


def test_link_script_fails_without_admin_records(fake_supabase):
    with pytest.raises(SystemExit) as exc:
        link_admins.main([])
    assert exc.value.code == 1
