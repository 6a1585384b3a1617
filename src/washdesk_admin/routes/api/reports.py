"""Reports API."""

from flask import Blueprint, jsonify

from washdesk_admin.decorators import admin_required
from washdesk_shared.i18n import resolve_locale
from washdesk_shared.serializers import success_response
from washdesk_shared.services import report_service

reports_bp = Blueprint("reports", __name__)


@reports_bp.get("/reports")
@admin_required
def get_reports():
    """Report catalog covering the dates of current bookings and payments."""
    return jsonify(success_response(report_service.build_reports(resolve_locale())))
