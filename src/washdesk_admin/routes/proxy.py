"""
Same-origin service routes: health check, order listing and storage policies.
"""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, jsonify

from washdesk_admin.decorators import general_admin_required
from washdesk_shared.config import get_active_config
from washdesk_shared.constants import Tables
from washdesk_shared.logging_config import get_logger
from washdesk_shared.serializers import error_response, success_response
from washdesk_shared.services import product_service
from washdesk_shared.supabase.client import get_service_db
from washdesk_shared.supabase.policies import fix_storage_policies

proxy_bp = Blueprint("proxy", __name__, url_prefix="/api")
logger = get_logger(__name__)


@proxy_bp.get("/health")
def health_check():
    """
    Check connectivity to Supabase: one row from ``admins``, then the bucket list.

    Any failure answers 503 with the failing step.
    """
    client = get_service_db()
    try:
        client.table(Tables.ADMINS).select("id").limit(1).execute()
    except Exception as e:
        logger.error(f"Health check: database query failed: {e}")
        return jsonify(
            error_response("Database connection failed", {"step": "database"})
        ), HTTPStatus.SERVICE_UNAVAILABLE

    try:
        buckets = client.storage.list_buckets()
    except Exception as e:
        logger.error(f"Health check: storage listing failed: {e}")
        return jsonify(
            error_response("Storage connection failed", {"step": "storage"})
        ), HTTPStatus.SERVICE_UNAVAILABLE

    return jsonify(
        success_response(
            {
                "status": "ok",
                "database": True,
                "storage": True,
                "buckets": [getattr(bucket, "name", bucket) for bucket in buckets or []],
            }
        )
    )


@proxy_bp.get("/test-orders")
@general_admin_required
def list_test_orders():
    orders = product_service.list_orders()
    return jsonify(success_response({"orders": orders, "count": len(orders)}))


@proxy_bp.post("/fix-storage-policies")
@general_admin_required
def post_fix_storage_policies():
    """Recreate the row-level-security policies on ``storage.objects``."""
    result = fix_storage_policies(get_active_config().storage_buckets)
    status = HTTPStatus.OK if result["success"] else HTTPStatus.INTERNAL_SERVER_ERROR
    return jsonify(success_response(result)), status
