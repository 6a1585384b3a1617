"""Payments dashboard: Stripe first, the payments table when Stripe is unavailable."""

from __future__ import annotations

from typing import Any

from postgrest.exceptions import APIError

from washdesk_shared.logging_config import get_logger
from washdesk_shared.services.payment_providers import PaymentError, get_payment_provider
from washdesk_shared.validation import ValidationError

logger = get_logger(__name__)

HIDDEN_STATUSES = {"canceled"}


def fetch_payments() -> dict[str, Any]:
    """
    Return ``{"payments": [...], "source": "stripe" | "ledger"}``.

    Canceled payment intents are left out.
    """
    try:
        records = get_payment_provider("stripe").list_payments()
        source = "stripe"
    except PaymentError as exc:
        logger.warning(f"Stripe unavailable ({exc}); using payments table")
        records = get_payment_provider("ledger").list_payments()
        source = "ledger"

    payments = [record.to_dict() for record in records if record.status not in HIDDEN_STATUSES]
    logger.info(f"Fetched {len(payments)} payments from {source}")
    return {"payments": payments, "source": source}


def fetch_payment(payment_id: str) -> dict[str, Any] | None:
    if payment_id.startswith("pi_"):
        try:
            record = get_payment_provider("stripe").get_payment(payment_id)
            return record.to_dict() if record else None
        except PaymentError as exc:
            logger.warning(f"Stripe lookup of {payment_id} failed ({exc}); using payments table")

    record = get_payment_provider("ledger").get_payment(payment_id)
    return record.to_dict() if record else None


def refund_payment(payment_id: str, amount: float | None = None) -> dict[str, Any]:
    """
    Refund a Stripe payment intent and mark the matching ledger rows.

    Raises:
        ValidationError: If ``payment_id`` is not a payment intent id
        PaymentError: If Stripe rejects the refund
    """
    if not payment_id.startswith("pi_"):
        raise ValidationError("Only Stripe payments can be refunded")

    refund = get_payment_provider("stripe").refund(payment_id, amount)
    try:
        get_payment_provider("ledger").refund(payment_id, amount)
    except APIError as exc:
        logger.warning(f"Refund of {payment_id} succeeded but ledger update failed: {exc}")
        refund["ledger_updated"] = False
    else:
        refund["ledger_updated"] = True
    return refund
