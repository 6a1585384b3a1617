"""
Centralized error handlers for the Flask application.

Every error leaves as the standard JSON envelope.
"""

from http import HTTPStatus

import httpx
from flask import Flask, jsonify
from postgrest.exceptions import APIError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from washdesk_shared.auth.service import AuthError
from washdesk_shared.constants import NO_ROWS_CODE
from washdesk_shared.i18n import get_translator
from washdesk_shared.logging_config import get_logger
from washdesk_shared.serializers import error_response
from washdesk_shared.services.payment_providers import PaymentError
from washdesk_shared.supabase.client import SupabaseNotConfigured
from washdesk_shared.supabase.storage import StorageError
from washdesk_shared.validation import NotFoundError, ValidationError

logger = get_logger(__name__)


def register_error_handlers(app: Flask) -> None:
    """
    Register centralized error handlers for the Flask app.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        logger.warning(f"Validation error: {e}")
        return jsonify(error_response(str(e))), HTTPStatus.BAD_REQUEST

    @app.errorhandler(PydanticValidationError)
    def handle_pydantic_validation_error(e: PydanticValidationError):
        """Handle Pydantic validation errors."""
        logger.warning(f"Pydantic validation error: {e}")
        t = get_translator("errors")
        details = e.errors(include_url=False, include_context=False)
        return jsonify(
            error_response(t("invalidData"), {"details": details})
        ), HTTPStatus.BAD_REQUEST

    @app.errorhandler(NotFoundError)
    def handle_not_found_error(e: NotFoundError):
        logger.info(f"Not found: {e}")
        return jsonify(error_response(str(e))), HTTPStatus.NOT_FOUND

    @app.errorhandler(AuthError)
    def handle_auth_error(e: AuthError):
        logger.warning(f"Auth error ({e.status}): {e.message}")
        return jsonify(error_response(e.message)), e.status

    @app.errorhandler(PaymentError)
    def handle_payment_error(e: PaymentError):
        logger.error(f"Payment gateway error: {e}")
        return jsonify(error_response(str(e))), HTTPStatus.BAD_GATEWAY

    @app.errorhandler(StorageError)
    def handle_storage_error(e: StorageError):
        logger.error(f"Storage error: {e}")
        return jsonify(error_response(str(e))), HTTPStatus.BAD_GATEWAY

    @app.errorhandler(APIError)
    def handle_supabase_error(e: APIError):
        """Errors returned by the Supabase REST API."""
        t = get_translator("errors")
        if e.code == NO_ROWS_CODE:
            return jsonify(error_response(t("notFound"))), HTTPStatus.NOT_FOUND
        logger.error(f"Supabase error {e.code}: {e.message}")
        return jsonify(error_response(e.message or t("upstream"))), HTTPStatus.BAD_GATEWAY

    @app.errorhandler(httpx.HTTPError)
    def handle_transport_error(e: httpx.HTTPError):
        logger.error(f"Supabase request failed: {e}")
        t = get_translator("errors")
        return jsonify(error_response(t("upstream"))), HTTPStatus.BAD_GATEWAY

    @app.errorhandler(SupabaseNotConfigured)
    def handle_supabase_not_configured(e: SupabaseNotConfigured):
        logger.error(f"Supabase not configured: {e}")
        t = get_translator("errors")
        return jsonify(error_response(t("serviceUnavailable"))), HTTPStatus.SERVICE_UNAVAILABLE

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(e: SQLAlchemyError):
        """Handle database errors."""
        logger.error(f"Database error: {e}", exc_info=True)
        t = get_translator("errors")
        return jsonify(error_response(t("database"))), HTTPStatus.INTERNAL_SERVER_ERROR

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        """Handle HTTP exceptions from Werkzeug."""
        logger.warning(f"HTTP exception {e.code}: {e.description}")
        return jsonify(error_response(e.description or str(e))), e.code

    @app.errorhandler(Exception)
    def handle_generic_exception(e: Exception):
        """Handle any unhandled exceptions."""
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        t = get_translator("errors")
        return jsonify(error_response(t("internal"))), HTTPStatus.INTERNAL_SERVER_ERROR

    @app.errorhandler(404)
    def handle_not_found(e):
        t = get_translator("errors")
        return jsonify(error_response(t("notFound"))), HTTPStatus.NOT_FOUND

    @app.errorhandler(405)
    def handle_method_not_allowed(e):
        t = get_translator("errors")
        return jsonify(error_response(t("methodNotAllowed"))), HTTPStatus.METHOD_NOT_ALLOWED
