"""
Serializers for consistent API responses.

Supabase returns plain dicts; the helpers below pick the columns each
dashboard needs and attach derived fields.
"""

from typing import Any

BANNER_FIELDS = (
    "id",
    "title",
    "description",
    "image_url",
    "is_active",
    "link_url",
    "start_date",
    "end_date",
    "priority",
    "target_audience",
    "metadata",
    "created_at",
    "updated_at",
)

OFFER_FIELDS = BANNER_FIELDS + ("code", "discount_type", "discount_value", "terms")


def _safe_float(value) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _pick(row: dict[str, Any], fields: tuple[str, ...]) -> dict[str, Any]:
    return {name: row.get(name) for name in fields}


def serialize_banner(row: dict[str, Any]) -> dict[str, Any]:
    return _pick(row, BANNER_FIELDS)


def serialize_offer(row: dict[str, Any]) -> dict[str, Any]:
    data = _pick(row, OFFER_FIELDS)
    data["discount_value"] = _safe_float(data["discount_value"])
    return data


def serialize_franchise(row: dict[str, Any], admin_name: str | None = None) -> dict[str, Any]:
    return {
        "id": row.get("id"),
        "name": row.get("name"),
        "status": row.get("status"),
        "branches": row.get("branches") or 0,
        "washers": row.get("washers") or 0,
        "admin_id": row.get("admin_id"),
        "adminName": admin_name or "N/A",
        "created_at": row.get("created_at"),
    }


def serialize_branch(
    row: dict[str, Any],
    franchise_name: str | None = None,
    services: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return {
        "id": row.get("id"),
        "name": row.get("name"),
        "franchise_id": row.get("franchise_id"),
        "franchise": franchise_name or "N/A",
        "location": row.get("location"),
        "address": row.get("address"),
        "city": row.get("city"),
        "phone_number": row.get("phone_number"),
        "ratings": _safe_float(row.get("ratings")),
        "pictures": row.get("pictures") or [],
        "latitude": _safe_float(row.get("latitude")),
        "longitude": _safe_float(row.get("longitude")),
        "admin_id": row.get("admin_id"),
        "services": services or [],
        "created_at": row.get("created_at"),
    }


def serialize_service(row: dict[str, Any], branch_name: str | None = None) -> dict[str, Any]:
    data = dict(row)
    data["price"] = _safe_float(row.get("price"))
    data["is_global"] = bool(row.get("is_global"))
    if branch_name is not None:
        data["branch_name"] = branch_name
    return data


def serialize_order(row: dict[str, Any]) -> dict[str, Any]:
    """Flatten an order joined with ``order_items(*, product:products(*))``."""
    items = []
    for item in row.get("order_items") or []:
        product = item.get("product") or {}
        quantity = item.get("quantity") or 0
        price = _safe_float(item.get("price_per_unit")) or 0.0
        items.append(
            {
                "id": item.get("id"),
                "product_id": item.get("product_id"),
                "product_name": product.get("name"),
                "quantity": quantity,
                "price_per_unit": price,
                "subtotal": round(quantity * price, 2),
            }
        )
    franchise = row.get("franchise") or {}
    return {
        "id": row.get("id"),
        "franchise_id": row.get("franchise_id"),
        "franchise_name": franchise.get("name"),
        "total_amount": _safe_float(row.get("total_amount")),
        "status": row.get("status"),
        "items": items,
        "created_at": row.get("created_at"),
        "updated_at": row.get("updated_at"),
    }


def success_response(data: Any, message: str | None = None) -> dict[str, Any]:
    """Create a standardized success response."""
    response = {"status": "success", "data": data, "error": None}
    if message:
        response["message"] = message
    return response


def error_response(error: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """Create a standardized error response."""
    response = {"status": "error", "data": None, "error": error}
    if details:
        response["details"] = details
    return response
