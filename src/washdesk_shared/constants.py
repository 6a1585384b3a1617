"""
Application constants and enums.
"""

from enum import Enum


class AdminRole(str, Enum):
    GENERAL = "general"
    FRANCHISE = "franchise"
    BRANCH = "branch"

    @classmethod
    def all_values(cls) -> set:
        return {member.value for member in cls}


class LoginRole(str, Enum):
    """Roles a user may request on the unified login page."""

    ADMIN = "admin"
    FRANCHISE = "franchise"


class BookingStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def all_values(cls) -> set:
        return {member.value for member in cls}


class PaymentStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REFUNDED = "refunded"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def all_values(cls) -> set:
        return {member.value for member in cls}


class WasherStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class Tables:
    ADMINS = "admins"
    BRANCHES = "branches"
    BRANCH_ADMINS = "branch_admins"
    BRANCH_HOURS = "branch_hours"
    FRANCHISES = "franchises"
    WASHERS = "washers"
    WASHER_SCHEDULES = "washer_schedules"
    SERVICES = "services"
    BOOKINGS = "bookings"
    PAYMENTS = "payments"
    PRODUCTS = "products"
    PRODUCT_CATEGORIES = "product_categories"
    PRODUCT_ORDERS = "product_orders"
    ORDER_ITEMS = "order_items"
    REVIEWS = "reviews"
    BANNERS = "banners"
    OFFERS = "offers"


DEFAULT_BUCKET = "images"
STORAGE_BUCKETS = ("images", "branches", "services")

# postgrest error codes
NO_ROWS_CODE = "PGRST116"
UNIQUE_VIOLATION_CODE = "23505"

TIME_OF_DAY_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"

SUPPORTED_LOCALES = ("en", "ar")
LOCALE_COOKIE = "NEXT_LOCALE"
ACCESS_TOKEN_COOKIE = "sb-access-token"
REFRESH_TOKEN_COOKIE = "sb-refresh-token"
PREFERENCE_MAX_AGE = 60 * 60 * 24 * 7
