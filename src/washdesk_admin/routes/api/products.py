"""Products, categories and product orders API."""

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from washdesk_admin.decorators import admin_required
from washdesk_shared.i18n import get_translator
from washdesk_shared.schemas import (
    CategoryRequest,
    OrderStatusRequest,
    PlaceOrderRequest,
    ProductRequest,
    UpdateProductRequest,
)
from washdesk_shared.serializers import error_response, success_response
from washdesk_shared.services import product_service

products_bp = Blueprint("products", __name__)


# ==================== PRODUCTS ====================


@products_bp.get("/products")
@admin_required
def get_products():
    return jsonify(success_response(product_service.list_products(request.args.get("category_id"))))


@products_bp.get("/products/<product_id>")
@admin_required
def get_product(product_id: str):
    product = product_service.get_product(product_id)
    if product is None:
        t = get_translator("admin.products")
        return jsonify(error_response(t("notFound"))), HTTPStatus.NOT_FOUND
    return jsonify(success_response(product))


@products_bp.post("/products")
@admin_required
def post_product():
    payload = request.get_json(silent=True) or {}
    product = product_service.create_product(ProductRequest(**payload).dict())
    t = get_translator("admin.products")
    return jsonify(success_response(product, t("created"))), HTTPStatus.CREATED


@products_bp.put("/products/<product_id>")
@admin_required
def put_product(product_id: str):
    payload = request.get_json(silent=True) or {}
    data = UpdateProductRequest(**payload).dict(exclude_unset=True)
    product = product_service.update_product(product_id, data)
    t = get_translator("admin.products")
    return jsonify(success_response(product, t("updated")))


@products_bp.delete("/products/<product_id>")
@admin_required
def delete_product(product_id: str):
    product_service.delete_product(product_id)
    t = get_translator("admin.products")
    return jsonify(success_response({"id": product_id}, t("deleted")))


# ==================== CATEGORIES ====================


@products_bp.get("/product-categories")
@admin_required
def get_categories():
    return jsonify(success_response(product_service.list_categories()))


@products_bp.post("/product-categories")
@admin_required
def post_category():
    payload = request.get_json(silent=True) or {}
    category = product_service.create_category(CategoryRequest(**payload).dict())
    t = get_translator("admin.categories")
    return jsonify(success_response(category, t("created"))), HTTPStatus.CREATED


@products_bp.put("/product-categories/<category_id>")
@admin_required
def put_category(category_id: str):
    payload = request.get_json(silent=True) or {}
    category = product_service.update_category(category_id, CategoryRequest(**payload).dict())
    t = get_translator("admin.categories")
    return jsonify(success_response(category, t("updated")))


@products_bp.delete("/product-categories/<category_id>")
@admin_required
def delete_category(category_id: str):
    product_service.delete_category(category_id)
    t = get_translator("admin.categories")
    return jsonify(success_response({"id": category_id}, t("deleted")))


# ==================== ORDERS ====================


@products_bp.get("/orders")
@admin_required
def get_orders():
    return jsonify(success_response(product_service.list_orders(request.args.get("franchise_id"))))


@products_bp.get("/orders/<order_id>")
@admin_required
def get_order(order_id: str):
    order = product_service.get_order_details(order_id)
    if order is None:
        t = get_translator("admin.orders")
        return jsonify(error_response(t("notFound"))), HTTPStatus.NOT_FOUND
    return jsonify(success_response(order))


@products_bp.post("/orders")
@admin_required
def post_order():
    """Place an order on behalf of a franchise (``franchise_id`` is required here)."""
    payload = request.get_json(silent=True) or {}
    order_data = PlaceOrderRequest(**payload)
    t = get_translator("admin.orders")
    if not order_data.franchise_id:
        return jsonify(error_response(t("noFranchise"))), HTTPStatus.BAD_REQUEST
    items = [item.dict() for item in order_data.items]
    order = product_service.place_product_order(order_data.franchise_id, items)
    return jsonify(success_response(order, t("placed"))), HTTPStatus.CREATED


@products_bp.put("/orders/<order_id>/status")
@admin_required
def put_order_status(order_id: str):
    payload = request.get_json(silent=True) or {}
    status = OrderStatusRequest(**payload).status
    order = product_service.update_order_status(order_id, status)
    t = get_translator("admin.orders")
    return jsonify(success_response(order, t("statusUpdated")))
