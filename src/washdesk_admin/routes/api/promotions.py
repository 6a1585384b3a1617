"""Banners and offers API."""

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from washdesk_admin.decorators import admin_required
from washdesk_shared.i18n import get_translator
from washdesk_shared.schemas import BannerRequest, OfferRequest
from washdesk_shared.serializers import success_response
from washdesk_shared.services import promotion_service

promotions_bp = Blueprint("promotions", __name__)


def _active_only() -> bool:
    return request.args.get("active", "").lower() in {"1", "true", "yes"}


# ==================== BANNERS ====================


@promotions_bp.get("/banners")
@admin_required
def get_banners():
    """
    List banners, highest priority first.

    Query params:
        - active: only active banners whose date window includes today
    """
    if _active_only():
        return jsonify(success_response(promotion_service.get_active_banners()))
    return jsonify(success_response(promotion_service.list_banners()))


@promotions_bp.post("/banners")
@admin_required
def post_banner():
    payload = request.get_json(silent=True) or {}
    banner = promotion_service.create_banner(BannerRequest(**payload).dict())
    t = get_translator("admin.banners")
    return jsonify(success_response(banner, t("created"))), HTTPStatus.CREATED


@promotions_bp.put("/banners/<banner_id>")
@admin_required
def put_banner(banner_id: str):
    payload = request.get_json(silent=True) or {}
    data = BannerRequest(**payload).dict(exclude_unset=True)
    banner = promotion_service.update_banner(banner_id, data)
    t = get_translator("admin.banners")
    return jsonify(success_response(banner, t("updated")))


@promotions_bp.delete("/banners/<banner_id>")
@admin_required
def delete_banner(banner_id: str):
    promotion_service.delete_banner(banner_id)
    t = get_translator("admin.banners")
    return jsonify(success_response({"id": banner_id}, t("deleted")))


# ==================== OFFERS ====================


@promotions_bp.get("/offers")
@admin_required
def get_offers():
    if _active_only():
        return jsonify(success_response(promotion_service.get_active_offers()))
    return jsonify(success_response(promotion_service.list_offers()))


@promotions_bp.post("/offers")
@admin_required
def post_offer():
    payload = request.get_json(silent=True) or {}
    offer = promotion_service.create_offer(OfferRequest(**payload).dict())
    t = get_translator("admin.offers")
    return jsonify(success_response(offer, t("created"))), HTTPStatus.CREATED


@promotions_bp.put("/offers/<offer_id>")
@admin_required
def put_offer(offer_id: str):
    payload = request.get_json(silent=True) or {}
    data = OfferRequest(**payload).dict(exclude_unset=True)
    offer = promotion_service.update_offer(offer_id, data)
    t = get_translator("admin.offers")
    return jsonify(success_response(offer, t("updated")))


@promotions_bp.delete("/offers/<offer_id>")
@admin_required
def delete_offer(offer_id: str):
    promotion_service.delete_offer(offer_id)
    t = get_translator("admin.offers")
    return jsonify(success_response({"id": offer_id}, t("deleted")))
