"""
Payments API.

Listing reads Stripe payment intents and falls back to the ``payments``
table when Stripe is not reachable or not configured.
"""

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from washdesk_admin.decorators import admin_required, general_admin_required
from washdesk_shared.i18n import get_translator
from washdesk_shared.schemas import RefundRequest
from washdesk_shared.serializers import error_response, success_response
from washdesk_shared.services import payment_service

payments_bp = Blueprint("payments", __name__)


@payments_bp.get("/payments")
@admin_required
def get_payments():
    return jsonify(success_response(payment_service.fetch_payments()))


@payments_bp.get("/payments/<payment_id>")
@admin_required
def get_payment(payment_id: str):
    payment = payment_service.fetch_payment(payment_id)
    if payment is None:
        t = get_translator("admin.payments")
        return jsonify(error_response(t("notFound"))), HTTPStatus.NOT_FOUND
    return jsonify(success_response(payment))


@payments_bp.post("/payments/<payment_id>/refund")
@general_admin_required
def post_refund(payment_id: str):
    """
    Refund a payment intent, fully or in part.

    Body (optional):
        {"amount": float}  # in currency units; omitted means the full amount
    """
    payload = request.get_json(silent=True) or {}
    amount = RefundRequest(**payload).amount
    refund = payment_service.refund_payment(payment_id, amount)
    t = get_translator("admin.payments")
    return jsonify(success_response(refund, t("refunded")))
