import pytest
from postgrest.exceptions import APIError

from washdesk_shared.services import product_service
from washdesk_shared.validation import NotFoundError, ValidationError


@pytest.fixture
def stock(fake_supabase):
    fake_supabase.seed(
        "products",
        {"id": "p-1", "name": "Foam", "price": 4.5, "stock_quantity": 5},
        {"id": "p-2", "name": "Wax", "price": 12, "stock_quantity": 1},
    )
    return fake_supabase


def _stock_of(fake, product_id):
    return next(row for row in fake.tables["products"] if row["id"] == product_id)[
        "stock_quantity"
    ]


def test_order_total():
    items = [
        {"quantity": 3, "price_per_unit": 4.5},
        {"quantity": 1, "price_per_unit": 0.333},
    ]
    assert product_service.order_total(items) == 13.83


def test_placing_an_order_takes_items_out_of_stock(stock):
    items = [
        {"product_id": "p-1", "quantity": 2, "price_per_unit": 4.5},
        {"product_id": "p-1", "quantity": 1, "price_per_unit": 4.5},
        {"product_id": "p-2", "quantity": 1, "price_per_unit": 12},
    ]
    order = product_service.place_product_order("fr-1", items)

    assert order["status"] == "pending"
    assert order["total_amount"] == 25.5
    assert len(stock.tables["order_items"]) == 3
    assert _stock_of(stock, "p-1") == 2
    assert _stock_of(stock, "p-2") == 0


def test_insufficient_stock_writes_nothing(stock):
    items = [
        {"product_id": "p-1", "quantity": 1, "price_per_unit": 4.5},
        {"product_id": "p-2", "quantity": 2, "price_per_unit": 12},
    ]
    with pytest.raises(ValidationError, match="p-2"):
        product_service.place_product_order("fr-1", items)

    assert "product_orders" not in stock.tables
    assert _stock_of(stock, "p-1") == 5


def test_unknown_product(stock):
    with pytest.raises(NotFoundError):
        product_service.check_stock_availability("p-404", 1)


def test_order_status_is_validated(stock):
    with pytest.raises(ValidationError):
        product_service.update_order_status("o-1", "lost")


def test_franchise_orders_for_itself(client, admins, auth_headers, stock):
    response = client.post(
        "/franchise/api/orders",
        json={
            "franchise_id": "fr-2",
            "items": [{"product_id": "p-1", "quantity": 2, "price_per_unit": 4.5}],
        },
        headers=auth_headers(admins.franchise),
    )
    assert response.status_code == 201
    assert response.get_json()["data"]["franchise_id"] == "fr-1"

    orders = client.get("/franchise/api/orders", headers=auth_headers(admins.franchise))
    assert [order["total_amount"] for order in orders.get_json()["data"]] == [9.0]


def test_franchise_cannot_read_other_orders(client, admins, auth_headers, stock):
    stock.seed("product_orders", {"id": "o-9", "franchise_id": "fr-2", "status": "pending"})
    response = client.get("/franchise/api/orders/o-9", headers=auth_headers(admins.franchise))
    assert response.status_code == 404


def test_admin_order_needs_a_franchise(client, admins, auth_headers, stock):
    response = client.post(
        "/admin/api/orders",
        json={"items": [{"product_id": "p-1", "quantity": 1, "price_per_unit": 4.5}]},
        headers=auth_headers(admins.general),
    )
    assert response.status_code == 400
    assert response.get_json()["error"] == "Select the franchise this order is for"


def test_empty_order_is_rejected(client, admins, auth_headers):
    response = client.post(
        "/franchise/api/orders", json={"items": []}, headers=auth_headers(admins.franchise)
    )
    assert response.status_code == 400


def test_failed_item_insert_removes_the_pending_order(stock):
    items = [{"product_id": "p-1", "quantity": 2, "price_per_unit": 4.5}]
    stock.fail_next("order_items")

    with pytest.raises(APIError):
        product_service.place_product_order("fr-1", items)

    assert stock.tables["product_orders"] == []
    assert stock.tables.get("order_items", []) == []
    assert _stock_of(stock, "p-1") == 5


def test_stock_race_removes_the_order_and_its_items(stock, monkeypatch):
    items = [{"product_id": "p-2", "quantity": 1, "price_per_unit": 12}]
    # another order takes the last unit between the check and the write
    levels = iter([1, 0])
    monkeypatch.setattr(product_service, "_stock_quantity", lambda product_id: next(levels))

    with pytest.raises(ValidationError, match="p-2"):
        product_service.place_product_order("fr-1", items)

    assert stock.tables["product_orders"] == []
    assert stock.tables["order_items"] == []
    assert _stock_of(stock, "p-2") == 1
