"""
Franchise dashboard API, mounted at ``/franchise/api``.

Every view runs for the franchise owned by the signed-in franchise admin
(``g.franchise_id``); records of other franchises answer 404.
"""

from http import HTTPStatus

from flask import Blueprint, g, jsonify, request

from washdesk_admin.decorators import franchise_admin_required
from washdesk_shared.i18n import get_translator
from washdesk_shared.logging_config import get_logger
from washdesk_shared.schemas import (
    BookingStatusRequest,
    PlaceOrderRequest,
    UpdateBranchRequest,
    UpdateWasherRequest,
    WasherRequest,
)
from washdesk_shared.serializers import success_response
from washdesk_shared.services import (
    booking_service,
    branch_service,
    franchise_service,
    product_service,
    review_service,
    service_catalog_service,
    washer_service,
)
from washdesk_shared.validation import NotFoundError

franchise_api_bp = Blueprint("franchise_api", __name__)
logger = get_logger(__name__)


def _require_branch(branch_id: str | None) -> str:
    if not branch_id or branch_id not in branch_service.list_branch_ids(g.franchise_id):
        raise NotFoundError("Branch not found")
    return branch_id


def _require_washer(washer_id: str) -> dict:
    washer = washer_service.get_washer(washer_id)
    if washer is None:
        raise NotFoundError("Washer not found")
    if washer.get("branch_id") not in branch_service.list_branch_ids(g.franchise_id):
        raise NotFoundError("Washer not found")
    return washer


@franchise_api_bp.get("/dashboard")
@franchise_admin_required
def get_dashboard():
    return jsonify(success_response(franchise_service.franchise_dashboard(g.franchise_id)))


@franchise_api_bp.get("/franchise")
@franchise_admin_required
def get_own_franchise():
    return jsonify(success_response(franchise_service.get_franchise(g.franchise_id)))


# ==================== BRANCHES ====================


@franchise_api_bp.get("/branches")
@franchise_admin_required
def get_branches():
    return jsonify(success_response(branch_service.list_branches(g.franchise_id)))


@franchise_api_bp.get("/branches/<branch_id>")
@franchise_admin_required
def get_branch(branch_id: str):
    _require_branch(branch_id)
    return jsonify(success_response(branch_service.get_branch(branch_id)))


@franchise_api_bp.put("/branches/<branch_id>")
@franchise_admin_required
def put_branch(branch_id: str):
    _require_branch(branch_id)
    payload = request.get_json(silent=True) or {}
    data = UpdateBranchRequest(**payload).dict(exclude_unset=True)
    data.pop("franchise_id", None)
    branch = branch_service.update_branch(branch_id, data)
    t = get_translator("admin.branches")
    return jsonify(success_response(branch, t("updated")))


@franchise_api_bp.get("/services")
@franchise_admin_required
def get_services():
    branch_id = request.args.get("branch_id")
    if branch_id:
        _require_branch(branch_id)
        services = service_catalog_service.list_services_for_branch(branch_id)
    else:
        services = service_catalog_service.list_global_services()
    return jsonify(success_response(services))


# ==================== WASHERS ====================


@franchise_api_bp.get("/washers")
@franchise_admin_required
def get_washers():
    return jsonify(success_response(washer_service.list_washers_for_franchise(g.franchise_id)))


@franchise_api_bp.post("/washers")
@franchise_admin_required
def post_washer():
    payload = request.get_json(silent=True) or {}
    data = WasherRequest(**payload).dict()
    _require_branch(data["branch_id"])
    washer = washer_service.create_washer(data)
    t = get_translator("admin.washers")
    return jsonify(success_response(washer, t("created"))), HTTPStatus.CREATED


@franchise_api_bp.put("/washers/<washer_id>")
@franchise_admin_required
def put_washer(washer_id: str):
    _require_washer(washer_id)
    payload = request.get_json(silent=True) or {}
    data = UpdateWasherRequest(**payload).dict(exclude_unset=True)
    if data.get("branch_id"):
        _require_branch(data["branch_id"])
    washer = washer_service.update_washer(washer_id, data)
    t = get_translator("admin.washers")
    return jsonify(success_response(washer, t("updated")))


@franchise_api_bp.delete("/washers/<washer_id>")
@franchise_admin_required
def delete_washer(washer_id: str):
    _require_washer(washer_id)
    washer_service.delete_washer(washer_id)
    t = get_translator("admin.washers")
    return jsonify(success_response({"id": washer_id}, t("deleted")))


# ==================== BOOKINGS ====================


@franchise_api_bp.get("/bookings")
@franchise_admin_required
def get_bookings():
    bookings = booking_service.list_bookings_for_franchise(
        g.franchise_id, request.args.get("status")
    )
    return jsonify(
        success_response(
            {"bookings": bookings, "summary": booking_service.booking_summary(bookings)}
        )
    )


@franchise_api_bp.put("/bookings/<booking_id>/status")
@franchise_admin_required
def put_booking_status(booking_id: str):
    booking = booking_service.get_booking(booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")
    _require_branch(booking.get("branch_id"))

    payload = request.get_json(silent=True) or {}
    status = BookingStatusRequest(**payload).status
    updated = booking_service.update_booking_status(booking_id, status)
    t = get_translator("admin.bookings")
    return jsonify(success_response(updated, t("statusUpdated")))


@franchise_api_bp.get("/reviews")
@franchise_admin_required
def get_reviews():
    branch_ids = branch_service.list_branch_ids(g.franchise_id)
    return jsonify(success_response(review_service.list_reviews(branch_ids)))


# ==================== PRODUCTS AND ORDERS ====================


@franchise_api_bp.get("/products")
@franchise_admin_required
def get_products():
    return jsonify(success_response(product_service.list_products(request.args.get("category_id"))))


@franchise_api_bp.get("/product-categories")
@franchise_admin_required
def get_categories():
    return jsonify(success_response(product_service.list_categories()))


@franchise_api_bp.get("/orders")
@franchise_admin_required
def get_orders():
    return jsonify(success_response(product_service.list_orders(g.franchise_id)))


@franchise_api_bp.get("/orders/<order_id>")
@franchise_admin_required
def get_order(order_id: str):
    order = product_service.get_order_details(order_id)
    if order is None or order.get("franchise_id") != g.franchise_id:
        raise NotFoundError("Order not found")
    return jsonify(success_response(order))


@franchise_api_bp.post("/orders")
@franchise_admin_required
def post_order():
    """
    Order products for the franchise.

    Body:
        {"items": [{"product_id": str, "quantity": int, "price_per_unit": float}]}
    """
    payload = request.get_json(silent=True) or {}
    order_data = PlaceOrderRequest(**payload)
    items = [item.dict() for item in order_data.items]
    order = product_service.place_product_order(g.franchise_id, items)
    t = get_translator("admin.orders")
    return jsonify(success_response(order, t("placed"))), HTTPStatus.CREATED
