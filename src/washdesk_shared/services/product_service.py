"""Product catalog, stock and franchise product orders."""

from __future__ import annotations

from typing import Any

from washdesk_shared.constants import OrderStatus, Tables
from washdesk_shared.datetime_utils import utcnow
from washdesk_shared.logging_config import get_logger
from washdesk_shared.serializers import serialize_order
from washdesk_shared.supabase.client import get_db, get_service_db
from washdesk_shared.validation import NotFoundError, ValidationError, validate_choice

logger = get_logger(__name__)

PRODUCT_SELECT = "*, category:product_categories(name)"
ORDER_SELECT = "*, order_items(*, product:products(*)), franchise:franchises(*)"


def _stamp(data: dict[str, Any]) -> dict[str, Any]:
    return {**data, "updated_at": utcnow().isoformat()}


# Products


def list_products(category_id: str | None = None) -> list[dict[str, Any]]:
    query = get_db().table(Tables.PRODUCTS).select(PRODUCT_SELECT)
    if category_id:
        query = query.eq("category_id", category_id)
    return query.order("name").execute().data or []


def get_product(product_id: str) -> dict[str, Any] | None:
    response = (
        get_db()
        .table(Tables.PRODUCTS)
        .select(PRODUCT_SELECT)
        .eq("id", product_id)
        .limit(1)
        .execute()
    )
    return response.data[0] if response.data else None


def create_product(data: dict[str, Any]) -> dict[str, Any]:
    response = get_service_db().table(Tables.PRODUCTS).insert(_stamp(data)).execute()
    product = response.data[0]
    logger.info(f"Created product {product['id']} ({product.get('name')})")
    return product


def update_product(product_id: str, data: dict[str, Any]) -> dict[str, Any]:
    response = (
        get_service_db().table(Tables.PRODUCTS).update(_stamp(data)).eq("id", product_id).execute()
    )
    if not response.data:
        raise NotFoundError("Product not found")
    return response.data[0]


def delete_product(product_id: str) -> None:
    response = get_service_db().table(Tables.PRODUCTS).delete().eq("id", product_id).execute()
    if not response.data:
        raise NotFoundError("Product not found")
    logger.info(f"Deleted product {product_id}")


# Categories


def list_categories() -> list[dict[str, Any]]:
    return get_db().table(Tables.PRODUCT_CATEGORIES).select("*").order("name").execute().data or []


def create_category(data: dict[str, Any]) -> dict[str, Any]:
    response = get_service_db().table(Tables.PRODUCT_CATEGORIES).insert(_stamp(data)).execute()
    return response.data[0]


def update_category(category_id: str, data: dict[str, Any]) -> dict[str, Any]:
    response = (
        get_service_db()
        .table(Tables.PRODUCT_CATEGORIES)
        .update(_stamp(data))
        .eq("id", category_id)
        .execute()
    )
    if not response.data:
        raise NotFoundError("Category not found")
    return response.data[0]


def delete_category(category_id: str) -> None:
    response = (
        get_service_db().table(Tables.PRODUCT_CATEGORIES).delete().eq("id", category_id).execute()
    )
    if not response.data:
        raise NotFoundError("Category not found")


# Stock and orders


def _stock_quantity(product_id: str) -> int:
    response = (
        get_service_db()
        .table(Tables.PRODUCTS)
        .select("stock_quantity")
        .eq("id", product_id)
        .limit(1)
        .execute()
    )
    if not response.data:
        raise NotFoundError(f"Product {product_id} not found")
    return int(response.data[0].get("stock_quantity") or 0)


def check_stock_availability(product_id: str, quantity: int) -> bool:
    return _stock_quantity(product_id) >= quantity


def order_total(items: list[dict[str, Any]]) -> float:
    return round(sum(item["quantity"] * item["price_per_unit"] for item in items), 2)


def _discard_order(db, order_id: str) -> None:
    db.table(Tables.ORDER_ITEMS).delete().eq("order_id", order_id).execute()
    db.table(Tables.PRODUCT_ORDERS).delete().eq("id", order_id).execute()


def place_product_order(franchise_id: str, items: list[dict[str, Any]]) -> dict[str, Any]:
    """
    Place a pending order for a franchise and take the items out of stock.

    Stock is checked for every item before anything is written. If the items
    cannot be recorded the pending order is removed again.

    Raises:
        ValidationError: If the order is empty or a product lacks stock
        NotFoundError: If a product does not exist
    """
    if not items:
        raise ValidationError("An order needs at least one item")

    requested: dict[str, int] = {}
    for item in items:
        requested[item["product_id"]] = requested.get(item["product_id"], 0) + item["quantity"]
    for product_id, quantity in requested.items():
        if not check_stock_availability(product_id, quantity):
            raise ValidationError(f"Insufficient stock for product {product_id}")

    db = get_service_db()
    order = (
        db.table(Tables.PRODUCT_ORDERS)
        .insert(
            {
                "franchise_id": franchise_id,
                "total_amount": order_total(items),
                "status": OrderStatus.PENDING.value,
            }
        )
        .execute()
        .data[0]
    )

    try:
        db.table(Tables.ORDER_ITEMS).insert(
            [
                {
                    "order_id": order["id"],
                    "product_id": item["product_id"],
                    "quantity": item["quantity"],
                    "price_per_unit": item["price_per_unit"],
                }
                for item in items
            ]
        ).execute()

        remaining: dict[str, int] = {}
        for product_id, quantity in requested.items():
            remaining[product_id] = _stock_quantity(product_id) - quantity
            if remaining[product_id] < 0:
                raise ValidationError(f"Insufficient stock for product {product_id}")
    except Exception:
        logger.warning(f"Discarding order {order['id']} after a failed write")
        _discard_order(db, order["id"])
        raise

    for product_id, quantity in remaining.items():
        db.table(Tables.PRODUCTS).update({"stock_quantity": quantity}).eq(
            "id", product_id
        ).execute()

    logger.info(f"Franchise {franchise_id} placed order {order['id']} ({len(items)} items)")
    return order


def update_order_status(order_id: str, status: str) -> dict[str, Any]:
    validate_choice(status, OrderStatus.all_values(), "order status")
    response = (
        get_service_db()
        .table(Tables.PRODUCT_ORDERS)
        .update(_stamp({"status": status}))
        .eq("id", order_id)
        .execute()
    )
    if not response.data:
        raise NotFoundError("Order not found")
    logger.info(f"Order {order_id} is now {status}")
    return response.data[0]


def list_orders(franchise_id: str | None = None) -> list[dict[str, Any]]:
    """Orders with items, products and franchise, newest first."""
    query = get_db().table(Tables.PRODUCT_ORDERS).select(ORDER_SELECT)
    if franchise_id:
        query = query.eq("franchise_id", franchise_id)
    response = query.order("created_at", desc=True).execute()
    return [serialize_order(row) for row in response.data or []]


def get_order_details(order_id: str) -> dict[str, Any] | None:
    response = (
        get_db()
        .table(Tables.PRODUCT_ORDERS)
        .select(ORDER_SELECT)
        .eq("id", order_id)
        .limit(1)
        .execute()
    )
    return serialize_order(response.data[0]) if response.data else None
