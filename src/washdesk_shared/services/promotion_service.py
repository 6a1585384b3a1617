"""Marketing banners and discount offers."""

from __future__ import annotations

from datetime import date
from typing import Any

from washdesk_shared.constants import Tables
from washdesk_shared.datetime_utils import parse_date, today, utcnow
from washdesk_shared.logging_config import get_logger
from washdesk_shared.serializers import serialize_banner, serialize_offer
from washdesk_shared.supabase.client import get_db
from washdesk_shared.validation import NotFoundError

logger = get_logger(__name__)


def is_running(row: dict[str, Any], on: date | None = None) -> bool:
    """True when ``on`` falls between the row's start and end dates; missing bounds are open."""
    on = on or today()
    start = parse_date(row.get("start_date"))
    end = parse_date(row.get("end_date"))
    if start and start > on:
        return False
    if end and end < on:
        return False
    return True


def _prepare(data: dict[str, Any]) -> dict[str, Any]:
    payload = dict(data)
    for field in ("start_date", "end_date"):
        if isinstance(payload.get(field), date):
            payload[field] = payload[field].isoformat()
    payload["updated_at"] = utcnow().isoformat()
    return payload


# Banners


def _banners_query(active_only: bool):
    query = get_db().table(Tables.BANNERS).select("*")
    if active_only:
        query = query.eq("is_active", True)
    return query.order("priority", desc=True).order("created_at", desc=True)


def list_banners() -> list[dict[str, Any]]:
    return [serialize_banner(row) for row in _banners_query(False).execute().data or []]


def get_active_banners(on: date | None = None) -> list[dict[str, Any]]:
    rows = _banners_query(True).execute().data or []
    return [serialize_banner(row) for row in rows if is_running(row, on)]


def create_banner(data: dict[str, Any]) -> dict[str, Any]:
    response = get_db().table(Tables.BANNERS).insert(_prepare(data)).execute()
    banner = response.data[0]
    logger.info(f"Created banner {banner['id']} ({banner.get('title')})")
    return serialize_banner(banner)


def update_banner(banner_id: str, data: dict[str, Any]) -> dict[str, Any]:
    response = get_db().table(Tables.BANNERS).update(_prepare(data)).eq("id", banner_id).execute()
    if not response.data:
        raise NotFoundError("Banner not found")
    return serialize_banner(response.data[0])


def delete_banner(banner_id: str) -> None:
    response = get_db().table(Tables.BANNERS).delete().eq("id", banner_id).execute()
    if not response.data:
        raise NotFoundError("Banner not found")
    logger.info(f"Deleted banner {banner_id}")


# Offers


def _offers_query(active_only: bool):
    query = get_db().table(Tables.OFFERS).select("*")
    if active_only:
        query = query.eq("is_active", True)
    return query.order("created_at", desc=True)


def list_offers() -> list[dict[str, Any]]:
    return [serialize_offer(row) for row in _offers_query(False).execute().data or []]


def get_active_offers(on: date | None = None) -> list[dict[str, Any]]:
    rows = _offers_query(True).execute().data or []
    return [serialize_offer(row) for row in rows if is_running(row, on)]


def create_offer(data: dict[str, Any]) -> dict[str, Any]:
    response = get_db().table(Tables.OFFERS).insert(_prepare(data)).execute()
    offer = response.data[0]
    logger.info(f"Created offer {offer['id']} ({offer.get('title')})")
    return serialize_offer(offer)


def update_offer(offer_id: str, data: dict[str, Any]) -> dict[str, Any]:
    response = get_db().table(Tables.OFFERS).update(_prepare(data)).eq("id", offer_id).execute()
    if not response.data:
        raise NotFoundError("Offer not found")
    return serialize_offer(response.data[0])


def delete_offer(offer_id: str) -> None:
    response = get_db().table(Tables.OFFERS).delete().eq("id", offer_id).execute()
    if not response.data:
        raise NotFoundError("Offer not found")
    logger.info(f"Deleted offer {offer_id}")
