from washdesk_shared.services import service_catalog_service


def test_global_services_collapse_by_name():
    services = [
        {"id": "1", "name": "Wash", "is_global": True},
        {"id": "2", "name": "Wash", "is_global": True},
        {"id": "3", "name": "Wax", "is_global": False, "branch_id": "br-1"},
    ]
    result = service_catalog_service.dedupe_global_services(services)
    assert [service["id"] for service in result] == ["1", "3"]


def test_branch_service_shadows_global_of_same_name():
    own = [{"id": "b1", "name": "Wash", "is_global": False}]
    globals_ = [
        {"id": "g1", "name": "Wash", "is_global": True},
        {"id": "g2", "name": "Vacuum", "is_global": True},
    ]
    merged = service_catalog_service.merge_branch_services(own, globals_)
    assert [service["id"] for service in merged] == ["b1", "g2"]


def test_list_services_for_branch(fake_supabase):
    fake_supabase.seed(
        "services",
        {"id": "g1", "name": "Wash", "is_global": True, "branch_id": None, "price": "10"},
        {"id": "g2", "name": "Wash", "is_global": True, "branch_id": None, "price": "10"},
        {"id": "b1", "name": "Polish", "is_global": False, "branch_id": "br-1", "price": 25},
        {"id": "b2", "name": "Detail", "is_global": False, "branch_id": "br-2", "price": 40},
    )
    services = service_catalog_service.list_services_for_branch("br-1")
    assert sorted(service["id"] for service in services) == ["b1", "g1"]
    assert all(isinstance(service["price"], float) for service in services)


def test_deleting_a_global_service_removes_every_copy(fake_supabase):
    fake_supabase.seed(
        "services",
        {"id": "g1", "name": "Wash", "is_global": True, "branch_id": None},
        {"id": "g2", "name": "Wash", "is_global": True, "branch_id": None},
        {"id": "b1", "name": "Wash", "is_global": False, "branch_id": "br-1"},
    )
    assert service_catalog_service.delete_service("g2") == 2
    assert [row["id"] for row in fake_supabase.tables["services"]] == ["b1"]


def test_global_service_is_created_without_branch(fake_supabase):
    created = service_catalog_service.create_service(
        {"name": "Wash", "price": 12.5, "is_global": True, "branch_id": "br-1"}
    )
    assert created["branch_id"] is None
    assert created["is_global"] is True
