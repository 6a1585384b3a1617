"""
Admin API - Modular Blueprint Structure

Mounted at ``/admin/api``. Each module handles one resource.
"""

from flask import Blueprint

# Create main API blueprint
api_bp = Blueprint("admin_api", __name__)

# Import and register sub-blueprints
from .bookings import bookings_bp  # noqa: E402
from .branches import branches_bp  # noqa: E402
from .franchises import franchises_bp  # noqa: E402
from .hours import hours_bp  # noqa: E402
from .payments import payments_bp  # noqa: E402
from .products import products_bp  # noqa: E402
from .promotions import promotions_bp  # noqa: E402
from .ratings import ratings_bp  # noqa: E402
from .reports import reports_bp  # noqa: E402
from .reviews import reviews_bp  # noqa: E402
from .services import services_bp  # noqa: E402
from .storage import storage_bp  # noqa: E402
from .users import users_bp  # noqa: E402
from .washers import washers_bp  # noqa: E402

# Register sub-blueprints
api_bp.register_blueprint(franchises_bp)
api_bp.register_blueprint(branches_bp)
api_bp.register_blueprint(hours_bp)
api_bp.register_blueprint(services_bp)
api_bp.register_blueprint(washers_bp)
api_bp.register_blueprint(bookings_bp)
api_bp.register_blueprint(payments_bp)
api_bp.register_blueprint(products_bp)
api_bp.register_blueprint(promotions_bp)
api_bp.register_blueprint(reviews_bp)
api_bp.register_blueprint(users_bp)
api_bp.register_blueprint(reports_bp)
api_bp.register_blueprint(storage_bp)
api_bp.register_blueprint(ratings_bp)

__all__ = ["api_bp"]
