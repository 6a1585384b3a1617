"""
Pydantic schemas for request validation.
"""

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, EmailStr, Field, validator

from washdesk_shared.constants import AdminRole, BookingStatus, OrderStatus
from washdesk_shared.validation import is_time_of_day


def _check_time(v):
    if v is not None and not is_time_of_day(v):
        raise ValueError("Invalid time format (HH:MM)")
    return v


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, pattern=r"^[^@]+@[^@]+\.[^@]+$")
    password: str = Field(..., min_length=1)
    role: Literal["admin", "franchise"] = "admin"

    @validator("email")
    def normalize_email(cls, v):
        return v.strip().lower()


class BranchLoginRequest(BaseModel):
    email: str = Field(..., min_length=3, pattern=r"^[^@]+@[^@]+\.[^@]+$")
    password: str = Field(..., min_length=1)

    @validator("email")
    def normalize_email(cls, v):
        return v.strip().lower()


class CreateAdminUserRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: str = Field(default=AdminRole.GENERAL.value)
    associated_id: str | None = None

    @validator("role")
    def validate_role_value(cls, v):
        if v not in AdminRole.all_values():
            allowed = ", ".join(sorted(AdminRole.all_values()))
            raise ValueError(f"Invalid role. Allowed values: {allowed}")
        return v


class UpdateAdminUserRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    role: str | None = None

    @validator("role")
    def validate_role_value(cls, v):
        if v is not None and v not in AdminRole.all_values():
            raise ValueError("Invalid role")
        return v


class CreateFranchiseRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    status: str = Field(default="active")
    admin_email: EmailStr | None = None
    admin_password: str | None = Field(None, min_length=6)
    admin_name: str | None = None


class UpdateFranchiseRequest(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=255)
    status: str | None = None
    admin_id: str | None = None


class CreateBranchRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    franchise_id: str = Field(..., pattern=r"^[0-9a-fA-F-]{36}$")
    location: str | None = None
    address: str | None = None
    city: str | None = None
    phone_number: str | None = None
    ratings: float | None = Field(None, ge=0, le=5)
    pictures: list[str] = Field(default_factory=list)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    admin_email: EmailStr | None = None
    admin_password: str | None = Field(None, min_length=6)


class UpdateBranchRequest(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=255)
    franchise_id: str | None = Field(None, pattern=r"^[0-9a-fA-F-]{36}$")
    location: str | None = None
    address: str | None = None
    city: str | None = None
    phone_number: str | None = None
    ratings: float | None = Field(None, ge=0, le=5)
    pictures: list[str] | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)


class ServiceRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: float = Field(..., ge=0)
    duration: int | None = Field(None, ge=0)
    branch_id: str | None = None
    is_global: bool = False

    @validator("is_global", always=True)
    def global_has_no_branch(cls, v, values):
        if v and values.get("branch_id"):
            raise ValueError("A global service cannot belong to a branch")
        if not v and not values.get("branch_id"):
            raise ValueError("branch_id is required for branch services")
        return v


class UpdateServiceRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    duration: int | None = Field(None, ge=0)


class WasherRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    branch_id: str = Field(..., min_length=1)
    status: Literal["active", "inactive"] = "active"
    rating: float = Field(default=0, ge=0, le=5)


class UpdateWasherRequest(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=255)
    branch_id: str | None = None
    status: Literal["active", "inactive"] | None = None
    rating: float | None = Field(None, ge=0, le=5)


class WasherScheduleRequest(BaseModel):
    washer_id: str = Field(..., min_length=1)
    day_of_week: int = Field(..., ge=0, le=6)
    start_time: str
    end_time: str

    @validator("start_time", "end_time")
    def validate_times(cls, v):
        return _check_time(v)


class UpdateWasherScheduleRequest(BaseModel):
    day_of_week: int | None = Field(None, ge=0, le=6)
    start_time: str | None = None
    end_time: str | None = None

    @validator("start_time", "end_time")
    def validate_times(cls, v):
        return _check_time(v)


class BranchHoursRequest(BaseModel):
    id: str | None = None
    branch_id: str = Field(..., min_length=1)
    day_of_week: int = Field(..., ge=0, le=6)
    open_time: str = "09:00"
    close_time: str = "17:00"
    is_closed: bool = False
    specific_date: date | None = None

    @validator("open_time", "close_time")
    def validate_times(cls, v):
        return _check_time(v)


class BookingStatusRequest(BaseModel):
    status: str

    @validator("status")
    def validate_status(cls, v):
        if v not in BookingStatus.all_values():
            allowed = ", ".join(sorted(BookingStatus.all_values()))
            raise ValueError(f"Invalid booking status. Allowed values: {allowed}")
        return v


class ProductRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: float = Field(..., ge=0)
    stock_quantity: int = Field(default=0, ge=0)
    category_id: str | None = None
    pictures: list[str] = Field(default_factory=list)


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    stock_quantity: int | None = Field(None, ge=0)
    category_id: str | None = None
    pictures: list[str] | None = None


class CategoryRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class OrderItemRequest(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(default=1, ge=1)
    price_per_unit: float = Field(..., ge=0)


class PlaceOrderRequest(BaseModel):
    franchise_id: str | None = None
    items: list[OrderItemRequest] = Field(..., min_length=1)


class OrderStatusRequest(BaseModel):
    status: str

    @validator("status")
    def validate_status(cls, v):
        if v not in OrderStatus.all_values():
            allowed = ", ".join(sorted(OrderStatus.all_values()))
            raise ValueError(f"Invalid order status. Allowed values: {allowed}")
        return v


class BannerRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    image_url: str | None = None
    is_active: bool = True
    link_url: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    priority: int = 0
    target_audience: str | None = None
    metadata: dict[str, Any] | None = None

    @validator("end_date")
    def end_after_start(cls, v, values):
        start = values.get("start_date")
        if v is not None and start is not None and v < start:
            raise ValueError("end_date must not be before start_date")
        return v


class OfferRequest(BannerRequest):
    code: str | None = None
    discount_type: Literal["percentage", "fixed"] = "percentage"
    discount_value: float = Field(default=0, ge=0)
    terms: str | None = None

    @validator("discount_value")
    def percentage_in_range(cls, v, values):
        if values.get("discount_type") == "percentage" and v > 100:
            raise ValueError("A percentage discount cannot exceed 100")
        return v


class RefundRequest(BaseModel):
    amount: float | None = Field(None, gt=0)


class PreferenceRequest(BaseModel):
    key: str = Field(..., min_length=1, max_length=64)
    value: str = Field(..., min_length=1, max_length=64)
