"""Report catalog synthesis for the admin reports page."""

from __future__ import annotations

from datetime import date
from typing import Any

from washdesk_shared.datetime_utils import format_date, parse_date
from washdesk_shared.datetime_utils import today as current_date
from washdesk_shared.i18n import get_translator
from washdesk_shared.services import booking_service, payment_service

REPORT_KEYS = ("monthlyRevenue", "userGrowth", "washerPerformance", "bookingTrends")

# shown until there is booking or payment data to describe
PLACEHOLDER_REPORTS = (
    ("monthlyRevenue", "June 2024", "2024-07-01"),
    ("userGrowth", "Q2 2024", "2024-07-01"),
    ("washerPerformance", "June 2024", "2024-07-02"),
    ("bookingTrends", "May 2024", "2024-06-01"),
)


def _us_date(value: date) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def format_date_range(first: date, last: date) -> str:
    """``June 2024`` when both dates share a month, else ``6/3/2024 - 7/1/2024``."""
    if first.year == last.year and first.month == last.month:
        return f"{first.strftime('%B')} {first.year}"
    return f"{_us_date(first)} - {_us_date(last)}"


def collect_dates(bookings: list[dict[str, Any]], payments: list[dict[str, Any]]) -> list[date]:
    dates = []
    for booking in bookings:
        parsed = parse_date(booking.get("date") or booking.get("created_at"))
        if parsed:
            dates.append(parsed)
    for payment in payments:
        parsed = parse_date(payment.get("created_at"))
        if parsed:
            dates.append(parsed)
    return dates


def report_names(locale: str | None = None) -> dict[str, str]:
    t = get_translator("reports", locale)
    return {
        "monthlyRevenue": t("monthlyRevenue"),
        "userGrowth": t("userGrowth"),
        "washerPerformance": t("washerPerformance"),
        "bookingTrends": t("bookingTrends"),
    }


def generate_reports(
    bookings: list[dict[str, Any]],
    payments: list[dict[str, Any]],
    today: date | None = None,
    locale: str | None = None,
) -> list[dict[str, str]]:
    names = report_names(locale)
    dates = collect_dates(bookings, payments)

    if not dates:
        return [
            {
                "id": str(index),
                "name": names[key],
                "date_range": date_range,
                "generated_on": generated,
            }
            for index, (key, date_range, generated) in enumerate(PLACEHOLDER_REPORTS, start=1)
        ]

    date_range = format_date_range(min(dates), max(dates))
    generated_on = format_date(today or current_date())
    return [
        {
            "id": str(index),
            "name": names[key],
            "date_range": date_range,
            "generated_on": generated_on,
        }
        for index, key in enumerate(REPORT_KEYS, start=1)
    ]


def build_reports(locale: str | None = None) -> list[dict[str, str]]:
    """Generate the catalog from the current bookings and payments."""
    bookings = booking_service.list_bookings()
    payments = payment_service.fetch_payments()["payments"]
    return generate_reports(bookings, payments, locale=locale)
