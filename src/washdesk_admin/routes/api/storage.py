"""Storage API: bucket bootstrap, setup check and image uploads."""

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from washdesk_admin.decorators import admin_required, general_admin_required
from washdesk_shared.i18n import get_translator
from washdesk_shared.logging_config import get_logger
from washdesk_shared.serializers import error_response, success_response
from washdesk_shared.supabase.storage import (
    check_storage_setup,
    delete_image,
    initialize_storage,
    upload_image,
)
from washdesk_shared.validation import ValidationError

storage_bp = Blueprint("storage", __name__)
logger = get_logger(__name__)

MAX_UPLOAD_BYTES = 5 * 1024 * 1024


@storage_bp.post("/storage/init")
@general_admin_required
def post_storage_init():
    """Create the public buckets; retried with the service role if needed."""
    result = initialize_storage()
    t = get_translator("admin.storage")
    if not result["success"]:
        return jsonify(error_response(t("failed"), result)), HTTPStatus.INTERNAL_SERVER_ERROR
    return jsonify(success_response(result, t("initialized")))


@storage_bp.get("/storage/status")
@admin_required
def get_storage_status():
    return jsonify(success_response(check_storage_setup()))


@storage_bp.post("/storage/images")
@admin_required
def post_image():
    """
    Upload an image.

    Form data:
        - file: the image
        - bucket: target bucket (optional, defaults to ``images``)
    """
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        raise ValidationError("No file provided")

    content = upload.read()
    if len(content) > MAX_UPLOAD_BYTES:
        raise ValidationError("File is too large (max 5MB)")

    url = upload_image(
        content,
        upload.filename,
        bucket=request.form.get("bucket") or None,
        content_type=upload.mimetype,
    )
    return jsonify(success_response({"url": url})), HTTPStatus.CREATED


@storage_bp.delete("/storage/images")
@admin_required
def delete_uploaded_image():
    payload = request.get_json(silent=True) or {}
    url = payload.get("url")
    if not url:
        raise ValidationError("url is required")
    delete_image(url, payload.get("bucket"))
    return jsonify(success_response({"url": url}))
